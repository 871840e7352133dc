from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException

from app.application.services.price_solver import (
    CryptoPriceSolver,
    FiatPriceSolver,
    PriceSolver,
)
from app.application.use_cases.amm_stats_common import PoolStatsCalculator
from app.application.use_cases.convert_to_fiat import ConvertToFiatUseCase
from app.application.use_cases.get_platform_summary import GetPlatformSummaryUseCase
from app.application.use_cases.get_pool_price_chart import GetPoolPriceChartUseCase
from app.application.use_cases.get_pool_slippage import GetPoolSlippageUseCase
from app.application.use_cases.get_pool_stats import GetPoolStatsUseCase
from app.application.use_cases.get_pools_stats import (
    BatchedPoolsStatsStrategy,
    GetPoolsStatsUseCase,
    NaivePoolsStatsStrategy,
)
from app.application.use_cases.get_pools_summary import GetPoolsSummaryUseCase
from app.application.use_cases.get_transactions_info import (
    GetDepositTransactionsUseCase,
    GetSwapTransactionsUseCase,
)
from app.domain.entities.units import NATIVE_TOKEN_ID, USD_UNITS
from app.domain.services.amm_stats_math import MILLIS_IN_DAY, projection_period_ms
from app.infrastructure.clients.fiat_rates import CoingeckoFiatRatesClient, FiatRateOverrides
from app.infrastructure.clients.node_network import NodeNetworkClient
from app.infrastructure.clients.token_list import TokenListClient
from app.infrastructure.db.engine import get_engine
from app.infrastructure.db.repositories.markets_repository import SqlMarketsRepository
from app.infrastructure.db.repositories.read_transactor import SqlReadTransactor
from app.infrastructure.system.clock import SystemClock
from app.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_read_transactor() -> SqlReadTransactor:
    settings = get_settings()
    return SqlReadTransactor(
        _get_db_engine(),
        recent_pools_ms=settings.recent_pools_days * MILLIS_IN_DAY,
    )


@lru_cache(maxsize=1)
def _get_fiat_rates_client() -> CoingeckoFiatRatesClient:
    settings = get_settings()
    return CoingeckoFiatRatesClient(
        api_base=settings.coingecko_api_base,
        timeout_seconds=settings.coingecko_timeout_seconds,
        coin_ids={NATIVE_TOKEN_ID: settings.native_coingecko_id},
        overrides=FiatRateOverrides(settings.price_overrides),
        cache_ttl_seconds=settings.coingecko_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def _get_token_list_client() -> TokenListClient:
    settings = get_settings()
    return TokenListClient(
        url=settings.token_list_url,
        timeout_seconds=settings.token_list_timeout_seconds,
        always_valid=settings.always_valid_tokens,
        cache_ttl_seconds=settings.token_list_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def _get_network_client() -> NodeNetworkClient:
    settings = get_settings()
    return NodeNetworkClient(
        api_base=settings.node_api_base,
        timeout_seconds=settings.node_timeout_seconds,
    )


def _get_crypto_solver() -> CryptoPriceSolver:
    return CryptoPriceSolver(markets_port=SqlMarketsRepository(_get_db_engine()))


def _get_fiat_solver(crypto_solver: CryptoPriceSolver | None = None) -> FiatPriceSolver:
    return FiatPriceSolver(
        crypto_solver=crypto_solver or _get_crypto_solver(),
        rates_port=_get_fiat_rates_client(),
    )


def _get_price_solver() -> PriceSolver:
    crypto_solver = _get_crypto_solver()
    return PriceSolver(
        crypto_solver=crypto_solver,
        fiat_solver=_get_fiat_solver(crypto_solver),
    )


def _get_pool_stats_calculator() -> PoolStatsCalculator:
    settings = get_settings()
    return PoolStatsCalculator(
        fiat_solver=_get_fiat_solver(),
        clock=SystemClock(),
        units=USD_UNITS,
        projection_ms=projection_period_ms(settings.fee_projection_days),
    )


def get_convert_to_fiat_use_case() -> ConvertToFiatUseCase:
    return ConvertToFiatUseCase(
        transactor=_get_read_transactor(),
        price_solver=_get_price_solver(),
    )


def get_platform_summary_use_case() -> GetPlatformSummaryUseCase:
    return GetPlatformSummaryUseCase(
        transactor=_get_read_transactor(),
        token_fetcher=_get_token_list_client(),
        fiat_solver=_get_fiat_solver(),
    )


def get_pools_summary_use_case() -> GetPoolsSummaryUseCase:
    settings = get_settings()
    return GetPoolsSummaryUseCase(
        transactor=_get_read_transactor(),
        token_fetcher=_get_token_list_client(),
        calculator=_get_pool_stats_calculator(),
        clock=SystemClock(),
        window_ms=settings.pools_summary_window_hours * 60 * 60 * 1000,
    )


def _build_pools_stats_use_case(strategy_name: str) -> GetPoolsStatsUseCase:
    transactor = _get_read_transactor()
    calculator = _get_pool_stats_calculator()
    if strategy_name == BatchedPoolsStatsStrategy.name:
        strategy = BatchedPoolsStatsStrategy(transactor=transactor, calculator=calculator)
    elif strategy_name == NaivePoolsStatsStrategy.name:
        strategy = NaivePoolsStatsStrategy(transactor=transactor, calculator=calculator)
    else:
        raise HTTPException(status_code=500, detail=f"Unknown pools stats strategy: {strategy_name}.")
    return GetPoolsStatsUseCase(strategy=strategy)


def get_pools_stats_use_case() -> GetPoolsStatsUseCase:
    return _build_pools_stats_use_case(get_settings().pools_stats_strategy)


def get_pools_stats_v2_use_case() -> GetPoolsStatsUseCase:
    return _build_pools_stats_use_case(BatchedPoolsStatsStrategy.name)


def get_pool_stats_use_case() -> GetPoolStatsUseCase:
    return GetPoolStatsUseCase(
        transactor=_get_read_transactor(),
        calculator=_get_pool_stats_calculator(),
    )


def get_pool_slippage_use_case() -> GetPoolSlippageUseCase:
    return GetPoolSlippageUseCase(
        transactor=_get_read_transactor(),
        network=_get_network_client(),
        bucket_width=get_settings().slippage_bucket_width,
    )


def get_pool_price_chart_use_case() -> GetPoolPriceChartUseCase:
    return GetPoolPriceChartUseCase(transactor=_get_read_transactor())


def get_swap_transactions_use_case() -> GetSwapTransactionsUseCase:
    return GetSwapTransactionsUseCase(
        transactor=_get_read_transactor(),
        fiat_solver=_get_fiat_solver(),
    )


def get_deposit_transactions_use_case() -> GetDepositTransactionsUseCase:
    return GetDepositTransactionsUseCase(
        transactor=_get_read_transactor(),
        fiat_solver=_get_fiat_solver(),
    )
