"""QuoteClient — fetch a gasless quote for a TradeRequest."""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from gasless_swap.core.errors import MalformedResponse, UpstreamError
from gasless_swap.data.rest_client import GaslessRestClient, response_body
from gasless_swap.models.quote import Quote
from gasless_swap.models.trade_request import TradeRequest

logger = structlog.get_logger("execution.quote_client")

QUOTE_PATH = "/gasless/quote"


class QuoteClient:
    """Requests one quote per call from ``/gasless/quote``."""

    def __init__(self, rest_client: GaslessRestClient) -> None:
        self._rest = rest_client

    async def get_quote(self, request: TradeRequest) -> Quote:
        """Fetch a quote for ``request``.

        Raises
        ------
        UpstreamError
            On any non-2xx response.
        MalformedResponse
            If the body is not a JSON object or does not parse as a quote.
        """
        params = {
            "chainId": str(self._rest.chain_id),
            "sellToken": request.sell_token,
            "buyToken": request.buy_token,
            "sellAmount": request.sell_amount,
            "taker": request.taker,
        }
        logger.info(
            "quote_client.requested",
            sell_token=request.sell_token,
            buy_token=request.buy_token,
            sell_amount=request.sell_amount,
            taker=request.taker,
        )

        response = await self._rest.get(QUOTE_PATH, params=params)
        if not response.is_success:
            raise UpstreamError(
                "Failed to fetch quote",
                status=response.status_code,
                status_text=response.reason_phrase,
                body=response_body(response),
            )

        body = response_body(response)
        if not isinstance(body, dict):
            raise MalformedResponse(QUOTE_PATH, "body is not a JSON object")
        try:
            quote = Quote.model_validate(body)
        except ValidationError as exc:
            raise MalformedResponse(QUOTE_PATH, str(exc)) from exc

        if quote.liquidity_available is False:
            logger.warning("quote_client.no_liquidity", sell_token=request.sell_token)
        logger.info("quote_client.received", buy_amount=quote.buy_amount)
        return quote
