"""SubmissionClient — post the signed package for relayed execution."""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from gasless_swap.core.errors import MalformedResponse, SubmissionRejected
from gasless_swap.data.rest_client import GaslessRestClient, response_body
from gasless_swap.models.signature import SignedAuthorization
from gasless_swap.models.submission import SubmissionResult

logger = structlog.get_logger("execution.submission_client")

SUBMIT_PATH = "/gasless/submit"


class SubmissionClient:
    """Posts ``{chainId, approval, trade}`` to ``/gasless/submit``.  Never retries."""

    def __init__(self, rest_client: GaslessRestClient) -> None:
        self._rest = rest_client

    def build_body(
        self, approval: SignedAuthorization, trade: SignedAuthorization,
    ) -> dict[str, object]:
        return {
            "chainId": self._rest.chain_id,
            "approval": approval.to_wire(),
            "trade": trade.to_wire(),
        }

    async def submit(
        self, approval: SignedAuthorization, trade: SignedAuthorization,
    ) -> SubmissionResult:
        """Submit the signed approval and trade.

        Raises
        ------
        SubmissionRejected
            On any non-2xx response; carries the response body.
        MalformedResponse
            If an accepted response has no ``tradeHash``.
        """
        response = await self._rest.post(SUBMIT_PATH, json=self.build_body(approval, trade))
        body = response_body(response)

        if not response.is_success:
            logger.error(
                "submission_client.rejected",
                status=response.status_code,
                status_text=response.reason_phrase,
                body=body,
            )
            raise SubmissionRejected(
                status=response.status_code,
                status_text=response.reason_phrase,
                body=body,
            )

        if not isinstance(body, dict):
            raise MalformedResponse(SUBMIT_PATH, "body is not a JSON object")
        try:
            result = SubmissionResult.model_validate(body)
        except ValidationError as exc:
            raise MalformedResponse(SUBMIT_PATH, str(exc)) from exc

        logger.info(
            "submission_client.accepted",
            status=response.status_code,
            status_text=response.reason_phrase,
            trade_hash=result.trade_hash,
        )
        return result
