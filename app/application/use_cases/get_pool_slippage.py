from __future__ import annotations

import logging

from app.application.dto.amm_stats import GetPoolSlippageInput
from app.application.ports.network_port import NetworkPort
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.use_cases.amm_stats_common import validate_pool_id
from app.domain.entities.amm_stats import PoolSlippage
from app.domain.exceptions import AmmStatsInputError
from app.domain.services.slippage import average_slippage


logger = logging.getLogger(__name__)


class GetPoolSlippageUseCase:
    def __init__(
        self,
        *,
        transactor: ReadTransactorPort,
        network: NetworkPort,
        bucket_width: int,
    ):
        if bucket_width <= 0:
            raise ValueError("bucket_width must be positive.")
        self._transactor = transactor
        self._network = network
        self._bucket_width = bucket_width

    async def execute(self, command: GetPoolSlippageInput) -> PoolSlippage | None:
        validate_pool_id(command.pool_id)
        if command.depth < 1:
            raise AmmStatsInputError("depth must be a positive integer.")

        current_height = await self._network.get_current_height()
        async with self._transactor.begin() as session:
            initial_state = await session.pools.prev_trace(
                command.pool_id,
                depth=command.depth,
                max_height=current_height,
            )
            traces = await session.pools.trace(
                command.pool_id,
                depth=command.depth,
                max_height=current_height,
            )
            info = await session.pools.info(command.pool_id)

        if info is None:
            return None
        if not traces:
            return PoolSlippage.zero()

        logger.debug(
            "amm_stats: slippage pool=%s height=%s traces=%s anchored=%s",
            command.pool_id,
            current_height,
            len(traces),
            initial_state is not None,
        )
        value = average_slippage(
            traces,
            initial_state=initial_state,
            bucket_width=self._bucket_width,
        )
        return PoolSlippage(value=value).scaled()
