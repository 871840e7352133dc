from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import (
    get_convert_to_fiat_use_case,
    get_deposit_transactions_use_case,
    get_platform_summary_use_case,
    get_pool_price_chart_use_case,
    get_pool_slippage_use_case,
    get_pool_stats_use_case,
    get_pools_stats_use_case,
    get_pools_stats_v2_use_case,
    get_pools_summary_use_case,
    get_swap_transactions_use_case,
)
from app.api.schemas.amm_stats import (
    AssetAmountResponse,
    FeesResponse,
    FiatEquivResponse,
    PlatformSummaryResponse,
    PoolSlippageResponse,
    PoolStatsResponse,
    PoolSummaryResponse,
    PricePointResponse,
    TimeWindowResponse,
    TotalValueLockedResponse,
    TransactionsInfoResponse,
    UnitsResponse,
    VolumeResponse,
)
from app.application.dto.amm_stats import (
    ConvertToFiatInput,
    GetPlatformSummaryInput,
    GetPoolPriceChartInput,
    GetPoolSlippageInput,
    GetPoolsStatsInput,
    GetPoolStatsInput,
    GetTransactionsInput,
)
from app.application.use_cases.convert_to_fiat import ConvertToFiatUseCase
from app.application.use_cases.get_platform_summary import GetPlatformSummaryUseCase
from app.application.use_cases.get_pool_price_chart import GetPoolPriceChartUseCase
from app.application.use_cases.get_pool_slippage import GetPoolSlippageUseCase
from app.application.use_cases.get_pool_stats import GetPoolStatsUseCase
from app.application.use_cases.get_pools_stats import GetPoolsStatsUseCase
from app.application.use_cases.get_pools_summary import GetPoolsSummaryUseCase
from app.application.use_cases.get_transactions_info import (
    GetDepositTransactionsUseCase,
    GetSwapTransactionsUseCase,
)
from app.domain.entities.amm_stats import PoolStats, TransactionsInfo
from app.domain.entities.asset import AssetAmount
from app.domain.entities.time_window import TimeWindow
from app.domain.entities.units import CryptoUnits, ValueUnits, units_decimals
from app.domain.exceptions import AmmStatsInputError
from app.domain.services.decimals import round_to_scale

router = APIRouter()


def _window(from_ms: int | None, to_ms: int | None) -> TimeWindow:
    return TimeWindow(from_ms=from_ms, to_ms=to_ms)


def _units(units: ValueUnits) -> UnitsResponse:
    if isinstance(units, CryptoUnits):
        return UnitsResponse(token_id=units.token_id, decimals=units_decimals(units))
    return UnitsResponse(currency=units.currency.id, decimals=units_decimals(units))


def _present(value: Decimal, units: ValueUnits) -> Decimal:
    return round_to_scale(value, units_decimals(units))


def _window_response(window: TimeWindow) -> TimeWindowResponse:
    return TimeWindowResponse(from_ms=window.from_ms, to_ms=window.to_ms)


def _asset(asset: AssetAmount) -> AssetAmountResponse:
    return AssetAmountResponse(
        id=asset.id,
        amount=asset.amount,
        ticker=asset.ticker,
        decimals=asset.decimals,
    )


def _pool_stats(stats: PoolStats) -> PoolStatsResponse:
    return PoolStatsResponse(
        id=stats.pool_id,
        locked_x=_asset(stats.locked_x),
        locked_y=_asset(stats.locked_y),
        tvl=TotalValueLockedResponse(
            value=_present(stats.tvl.value, stats.tvl.units),
            units=_units(stats.tvl.units),
        ),
        volume=VolumeResponse(
            value=_present(stats.volume.value, stats.volume.units),
            units=_units(stats.volume.units),
            window=_window_response(stats.volume.window),
        ),
        fees=FeesResponse(
            value=_present(stats.fees.value, stats.fees.units),
            units=_units(stats.fees.units),
            window=_window_response(stats.fees.window),
        ),
        yearly_fees_percent=stats.yearly_fees_percent,
    )


def _transactions(info: TransactionsInfo) -> TransactionsInfoResponse:
    return TransactionsInfoResponse(
        num_txs=info.num_txs,
        avg_tx_value=info.avg_tx_value,
        max_tx_value=_present(info.max_tx_value, info.units),
        units=_units(info.units),
    )


@router.get("/v1/amm/platform/stats", response_model=PlatformSummaryResponse)
async def get_platform_stats(
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    use_case: GetPlatformSummaryUseCase = Depends(get_platform_summary_use_case),
):
    try:
        summary = await use_case.execute(GetPlatformSummaryInput(window=_window(from_ms, to_ms)))
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return PlatformSummaryResponse(
        tvl=TotalValueLockedResponse(
            value=_present(summary.tvl.value, summary.tvl.units),
            units=_units(summary.tvl.units),
        ),
        volume=VolumeResponse(
            value=_present(summary.volume.value, summary.volume.units),
            units=_units(summary.volume.units),
            window=_window_response(summary.volume.window),
        ),
    )


@router.get("/v1/amm/pools/summary", response_model=list[PoolSummaryResponse])
async def get_pools_summary(
    use_case: GetPoolsSummaryUseCase = Depends(get_pools_summary_use_case),
):
    summaries = await use_case.execute()
    return [
        PoolSummaryResponse(
            base_id=row.base_id,
            base_symbol=row.base_symbol,
            base_name=row.base_name,
            quote_id=row.quote_id,
            quote_symbol=row.quote_symbol,
            quote_name=row.quote_name,
            last_price=row.last_price,
            base_volume=row.base_volume,
            quote_volume=row.quote_volume,
        )
        for row in summaries
    ]


async def _pools_stats(
    use_case: GetPoolsStatsUseCase,
    from_ms: int | None,
    to_ms: int | None,
) -> list[PoolStatsResponse]:
    try:
        stats = await use_case.execute(GetPoolsStatsInput(window=_window(from_ms, to_ms)))
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [_pool_stats(row) for row in stats]


@router.get("/v1/amm/pools/stats", response_model=list[PoolStatsResponse])
async def get_pools_stats(
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    use_case: GetPoolsStatsUseCase = Depends(get_pools_stats_use_case),
):
    return await _pools_stats(use_case, from_ms, to_ms)


@router.get("/v2/amm/pools/stats", response_model=list[PoolStatsResponse])
async def get_pools_stats_v2(
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    use_case: GetPoolsStatsUseCase = Depends(get_pools_stats_v2_use_case),
):
    return await _pools_stats(use_case, from_ms, to_ms)


@router.get("/v1/amm/pool/{pool_id}/stats", response_model=PoolStatsResponse)
async def get_pool_stats(
    pool_id: str,
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    use_case: GetPoolStatsUseCase = Depends(get_pool_stats_use_case),
):
    try:
        stats = await use_case.execute(
            GetPoolStatsInput(pool_id=pool_id, window=_window(from_ms, to_ms))
        )
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if stats is None:
        raise HTTPException(status_code=404, detail="Pool not found.")
    return _pool_stats(stats)


@router.get("/v1/amm/pool/{pool_id}/slippage", response_model=PoolSlippageResponse)
async def get_pool_slippage(
    pool_id: str,
    depth: int = Query(default=20),
    use_case: GetPoolSlippageUseCase = Depends(get_pool_slippage_use_case),
):
    try:
        slippage = await use_case.execute(GetPoolSlippageInput(pool_id=pool_id, depth=depth))
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if slippage is None:
        raise HTTPException(status_code=404, detail="Pool not found.")
    return PoolSlippageResponse(slippage_percent=slippage.value)


@router.get("/v1/amm/pool/{pool_id}/chart", response_model=list[PricePointResponse])
async def get_pool_price_chart(
    pool_id: str,
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    resolution: int = Query(default=60),
    use_case: GetPoolPriceChartUseCase = Depends(get_pool_price_chart_use_case),
):
    try:
        points = await use_case.execute(
            GetPoolPriceChartInput(
                pool_id=pool_id,
                window=_window(from_ms, to_ms),
                resolution=resolution,
            )
        )
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [PricePointResponse(timestamp=point.timestamp, price=point.price) for point in points]


@router.get("/v1/amm/swaps", response_model=TransactionsInfoResponse)
async def get_swap_transactions(
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    use_case: GetSwapTransactionsUseCase = Depends(get_swap_transactions_use_case),
):
    try:
        info = await use_case.execute(GetTransactionsInput(window=_window(from_ms, to_ms)))
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _transactions(info)


@router.get("/v1/amm/deposits", response_model=TransactionsInfoResponse)
async def get_deposit_transactions(
    from_ms: int | None = Query(default=None, alias="from"),
    to_ms: int | None = Query(default=None, alias="to"),
    use_case: GetDepositTransactionsUseCase = Depends(get_deposit_transactions_use_case),
):
    try:
        info = await use_case.execute(GetTransactionsInput(window=_window(from_ms, to_ms)))
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _transactions(info)


@router.get("/v1/amm/convert/{token_id}", response_model=FiatEquivResponse)
async def convert_to_fiat(
    token_id: str,
    amount: int = Query(...),
    use_case: ConvertToFiatUseCase = Depends(get_convert_to_fiat_use_case),
):
    try:
        equiv = await use_case.execute(ConvertToFiatInput(token_id=token_id, amount=amount))
    except AmmStatsInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if equiv is None:
        raise HTTPException(status_code=404, detail="Asset not found or not priced.")
    return FiatEquivResponse(
        value=_present(equiv.value, equiv.units),
        units=_units(equiv.units),
    )
