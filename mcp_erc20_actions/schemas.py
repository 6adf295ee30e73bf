"""Argument schemas for ERC20 actions."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GetBalanceSchema(BaseModel):
    """Input schema for get_balance."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    contract_address: str = Field(
        ...,
        alias="contractAddress",
        description="The contract address of the token to get the balance for",
    )


class TransferSchema(BaseModel):
    """Input schema for transfer."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    amount: str = Field(
        ...,
        description="The amount of the asset to transfer, in the token's smallest unit",
    )
    contract_address: str = Field(
        ...,
        alias="contractAddress",
        description="The contract address of the token to transfer",
    )
    destination: str = Field(
        ...,
        description="The destination to transfer the funds",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_is_unsigned_integer(cls, value):
        if isinstance(value, bool):
            raise ValueError("amount must be an unsigned integer")
        if isinstance(value, int):
            value = str(value)
        if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
            raise ValueError("amount must be an unsigned integer string")
        return value
