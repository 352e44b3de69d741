"""
Account update records.

The validator plugin interface has delivered account notifications in several
shapes over time. Each shape is a variant below; normalize() is the one place
that turns any of them into the canonical AccountUpdate row that travels on
the subject and lands in ClickHouse.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Dict, Optional, Type, Union

import base58
from pydantic import BaseModel, Field, field_validator

PUBKEY_LEN = 32
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1


class AccountUpdate(BaseModel):
    """Canonical row: one balance observation for one account at one slot."""

    timestamp: str
    slot: int = Field(ge=0, le=U64_MAX)
    write_version: int = Field(default=0, ge=0, le=U64_MAX)
    address: str
    balance: int = Field(ge=0, le=U128_MAX)

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, v: str) -> str:
        datetime.strptime(v, TIMESTAMP_FORMAT)
        return v

    @field_validator("address")
    @classmethod
    def _check_address(cls, v: str) -> str:
        decode_pubkey(v)
        return v

    def to_json(self) -> str:
        """Compact single-line JSON, ready for JSONEachRow."""
        return self.model_dump_json()


# --- account info variants ---


@dataclass(frozen=True)
class AccountInfoV1:
    pubkey: bytes
    lamports: int
    owner: bytes = b""
    executable: bool = False
    rent_epoch: int = 0

    version: ClassVar[str] = "0.0.1"


@dataclass(frozen=True)
class AccountInfoV2:
    pubkey: bytes
    lamports: int
    write_version: int
    owner: bytes = b""
    executable: bool = False
    rent_epoch: int = 0
    txn_signature: Optional[str] = None

    version: ClassVar[str] = "0.0.2"


@dataclass(frozen=True)
class AccountInfoV3:
    pubkey: bytes
    lamports: int
    write_version: int
    owner: bytes = b""
    executable: bool = False
    rent_epoch: int = 0
    txn: Optional[str] = None

    version: ClassVar[str] = "0.0.3"


AccountInfo = Union[AccountInfoV1, AccountInfoV2, AccountInfoV3]


# --- helpers ---


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """UTC, second precision; naive datetimes are taken as UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime(TIMESTAMP_FORMAT)


def encode_pubkey(pubkey: bytes) -> str:
    if len(pubkey) != PUBKEY_LEN:
        raise ValueError(f"pubkey must be {PUBKEY_LEN} bytes, got {len(pubkey)}")
    return base58.b58encode(pubkey).decode("ascii")


def decode_pubkey(text: str) -> bytes:
    """Accepts base58 text or a 64-char hex string."""
    if len(text) == 2 * PUBKEY_LEN:
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raw = base58.b58decode(text)
    else:
        raw = base58.b58decode(text)
    if len(raw) != PUBKEY_LEN:
        raise ValueError(f"pubkey must decode to {PUBKEY_LEN} bytes, got {len(raw)}")
    return raw


# --- normalization ---


def _from_v1(info: AccountInfoV1) -> Dict[str, Any]:
    return {"write_version": 0}


def _from_v2(info: AccountInfoV2) -> Dict[str, Any]:
    return {"write_version": info.write_version}


def _from_v3(info: AccountInfoV3) -> Dict[str, Any]:
    return {"write_version": info.write_version}


_CONVERTERS: Dict[type, Callable[[Any], Dict[str, Any]]] = {
    AccountInfoV1: _from_v1,
    AccountInfoV2: _from_v2,
    AccountInfoV3: _from_v3,
}


def normalize(info: AccountInfo, slot: int, now: Optional[datetime] = None) -> AccountUpdate:
    """Convert any account info variant into an AccountUpdate row."""
    try:
        convert = _CONVERTERS[type(info)]
    except KeyError:
        raise TypeError(f"unsupported account info shape: {type(info).__name__}") from None
    return AccountUpdate(
        timestamp=format_timestamp(now or utc_now()),
        slot=slot,
        address=encode_pubkey(info.pubkey),
        balance=info.lamports,
        **convert(info),
    )


_VARIANTS: Dict[str, Type] = {cls.version: cls for cls in _CONVERTERS}


def parse_account_info(obj: Dict[str, Any]) -> AccountInfo:
    """Build a variant from a JSON object tagged with "version".

    Example:
        parse_account_info({"version": "0.0.2", "pubkey": "<base58>",
                            "lamports": 10, "write_version": 3})
    """
    version = obj.get("version")
    cls = _VARIANTS.get(version)
    if cls is None:
        raise ValueError(f"unknown account info version: {version!r}")

    fields = {k: v for k, v in obj.items() if k not in ("version", "slot", "is_startup")}
    fields["pubkey"] = decode_pubkey(str(fields.get("pubkey", "")))
    if "owner" in fields:
        fields["owner"] = decode_pubkey(str(fields["owner"]))
    if cls is AccountInfoV1:
        # V1 notifications never carried a write version
        fields.pop("write_version", None)
    return cls(**fields)
