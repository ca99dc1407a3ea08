from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base error; rendered as ``{"error": ..., "details": ...}``"""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequest(GatewayError):
    status_code = 400


class MissingParameters(InvalidRequest):
    def __init__(self):
        super().__init__("Missing required parameters for contract interaction.")


class InvalidAddress(InvalidRequest):
    pass


class FunctionNotFound(InvalidRequest):
    def __init__(self, function_name: str):
        super().__init__(f"Function {function_name} not found in ABI")
        self.function_name = function_name


class BlockRangeInvalid(InvalidRequest):
    def __init__(self):
        super().__init__("Number of blocks must be between 1 and 100")


class WouldRevert(InvalidRequest):
    def __init__(self, reason: str):
        super().__init__(
            "Transaction would revert, likely due to insufficient balance or invalid parameters.",
            details=reason,
        )


class FeeUnavailable(GatewayError):
    def __init__(self):
        super().__init__("Unable to fetch gas price")


class ChainError(GatewayError):
    pass


class PriceServiceError(GatewayError):
    pass
