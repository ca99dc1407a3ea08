from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Request side

class GasEstimateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contractAddress: Optional[str] = Field(None, description="Target contract address (0x...)")
    abi: Optional[List[Any]] = Field(None, description="Contract ABI entries")
    functionName: str = Field(..., description="Contract method or built-in action name")
    args: List[Any] = Field(default_factory=list, description="Positional call arguments")
    sender: Optional[str] = Field(None, alias="from", description="Sender address for estimation")
    decimals: Optional[int] = Field(
        None, ge=0, le=77, description="Display decimals for balanceOf results"
    )


class AbiParameter(BaseModel):
    name: str = ""
    type: str
    components: Optional[List["AbiParameter"]] = None


class FunctionDescriptor(BaseModel):
    """One ``function`` entry of a contract ABI"""

    name: str
    type: str = "function"
    stateMutability: Optional[str] = None
    constant: Optional[bool] = None
    payable: Optional[bool] = None
    inputs: List[AbiParameter] = Field(default_factory=list)
    outputs: List[AbiParameter] = Field(default_factory=list)

    @property
    def mutability(self) -> str:
        # Pre-0.4.16 ABIs only carry constant/payable
        if self.stateMutability:
            return self.stateMutability
        if self.constant:
            return "view"
        if self.payable:
            return "payable"
        return "nonpayable"

    @property
    def is_read_only(self) -> bool:
        return self.mutability in ("view", "pure")


# Response side

class BlockSummary(BaseModel):
    number: int = Field(..., description="Block number")
    timestamp: str = Field(..., description="Block time, ISO-8601 UTC")
    transactions: int = Field(..., description="Transaction count")
    hash: str = Field(..., description="Block hash (0x...)")
    validator: Optional[str] = Field(None, description="Fee recipient / miner address")


class GasEstimateResponse(BaseModel):
    message: Optional[str] = Field(None, description="Human readable summary")
    estimatedGas: str = Field("0", description="Estimated gas units")
    gasPrice: str = Field("0 gwei", description="Gas price in gwei")
    estimatedFeeInETH: str = Field("0", description="Estimated fee in ETH")
    result: Optional[Any] = Field(None, description="Mode dependent payload")

    def to_body(self) -> Dict[str, Any]:
        """JSON body; ``message`` and ``result`` only when the mode sets them"""
        omit = {name for name in ("message", "result") if getattr(self, name) is None}
        return self.model_dump(exclude=omit)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
