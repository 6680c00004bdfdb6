"""Authorization gate for privileged operations.

Every check is a fresh POST /auth/validate round-trip; nothing is
cached between calls. A failed check is a "no" answer, never an error.
"""

from itwhip.core.dispatcher import RequestDispatcher
from itwhip.core.errors import ItWhipError, PropertyNotActivatedError
from itwhip.core.models import AuthorizationState
from itwhip.logging.sdk_log import get_sdk_logger

HOTEL_ACCOUNT = "hotel"


class AuthorizationGate:
    """Validates the configured credential against the ItWhip API."""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    async def check_authorization(self) -> AuthorizationState:
        try:
            envelope = await self._dispatcher.dispatch("/auth/validate", method="POST")
        except ItWhipError as e:
            get_sdk_logger().warning(
                "Authorization check failed",
                extra={"sdk_data": {"error_kind": e.kind.value, "reason": e.message}},
            )
            return AuthorizationState(valid=False, raw_details={"valid": False, "error": e.message})

        details = envelope.data if isinstance(envelope.data, dict) else {}
        if not envelope.ok:
            return AuthorizationState(valid=False, raw_details={**details, "valid": False})

        return AuthorizationState(
            valid=details.get("valid") is True,
            account_type=details.get("accountType") or details.get("account_type"),
            raw_details=details,
        )

    async def is_authorized(self, account_type: str = HOTEL_ACCOUNT) -> bool:
        state = await self.check_authorization()
        return state.valid and state.account_type == account_type

    async def require(self, account_type: str = HOTEL_ACCOUNT) -> AuthorizationState:
        """Check authorization and raise PropertyNotActivatedError on denial."""
        state = await self.check_authorization()
        if not state.valid or state.account_type != account_type:
            get_sdk_logger().warning(
                "Privileged operation denied",
                extra={"sdk_data": {
                    "valid": state.valid,
                    "account_type": state.account_type,
                    "required_account_type": account_type,
                }},
            )
            raise PropertyNotActivatedError()
        return state
