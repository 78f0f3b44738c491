import os
from dataclasses import dataclass, fields, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from solders.pubkey import Pubkey

from .errors import InvalidParameter
from .models import TransactionMode


@dataclass(frozen=True)
class ProgramConfig:
    global_account: str = "4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf"
    fee_recipient: str = "CebN5WGQ4jvEPvsVU4EoHEpgzq1VV7AbicfhtW4xC9iM"
    program_id: str = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
    event_authority: str = "Ce6TQqeHC9p8KetsN6JsjHK7UTZk7nasjjnr7XxXp9F1"
    fee_collection_address: str = "BVCgKcceK8StA4ognszUWLUMWksU7auvPBmjN7f7RBs"
    fee_rate: Decimal = Decimal("0.005")
    compute_unit_limit: int = 1_000_000


@dataclass(frozen=True)
class ServiceConfig:
    price_api_base_url: str = "https://frontend-api.pump.fun"
    rpc_endpoint: str = "https://api.mainnet-beta.solana.com"
    commitment: str = "confirmed"
    request_timeout: float = 10.0
    retries: int = 3
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0"
    host: str = "0.0.0.0"
    port: int = 3000
    transaction_mode: TransactionMode = TransactionMode.EXECUTE
    log_level: str = "INFO"
    log_file: Optional[str] = None


ADDRESS_FIELDS = ("global_account", "fee_recipient", "program_id", "event_authority", "fee_collection_address")

PROGRAM_ENV = {
    "GLOBAL_PUBLIC_KEY": "global_account",
    "FEE_RECIPIENT_PUBLIC_KEY": "fee_recipient",
    "PUMP_FUN_PROGRAM": "program_id",
    "PUMP_FUN_ACCOUNT": "event_authority",
    "FEE_RECIPIENT_ADDRESS": "fee_collection_address",
    "FEE_PERCENTAGE": "fee_rate",
}

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

SERVICE_ENV = {
    "PRICE_API_BASE_URL": "price_api_base_url",
    "RPC_ENDPOINT": "rpc_endpoint",
    "PORT": "port",
    "TRANSACTION_MODE": "transaction_mode",
    "LOG_LEVEL": "log_level",
}


def _coerce(name: str, value: Any, default: Any) -> Any:
    try:
        if isinstance(default, TransactionMode):
            return TransactionMode(str(value).lower())
        if isinstance(default, Decimal):
            return Decimal(str(value))
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidParameter(f"invalid value for {name}: {value!r}", cause=exc) from exc
    return value if value is None else str(value)


def _build(cls, section: Mapping[str, Any], env: Mapping[str, str], env_map: Mapping[str, str]):
    defaults = cls()
    known = {f.name for f in fields(cls)}
    overrides: Dict[str, Any] = {}
    for key, value in (section or {}).items():
        if key not in known:
            raise InvalidParameter(f"unknown {cls.__name__} key: {key}")
        overrides[key] = _coerce(key, value, getattr(defaults, key))
    for var, key in env_map.items():
        # empty variables are treated as unset
        if env.get(var):
            overrides[key] = _coerce(key, env[var], getattr(defaults, key))
    return replace(defaults, **overrides)


def validate_program_config(config: ProgramConfig) -> ProgramConfig:
    for name in ADDRESS_FIELDS:
        value = getattr(config, name)
        try:
            Pubkey.from_string(value)
        except ValueError as exc:
            raise InvalidParameter(f"{name} is not a valid public key: {value!r}", cause=exc) from exc
    if not Decimal(0) <= config.fee_rate < Decimal(1):
        raise InvalidParameter(f"fee_rate must be within [0, 1): {config.fee_rate}")
    if config.compute_unit_limit <= 0:
        raise InvalidParameter("compute_unit_limit must be positive")
    return config


def validate_service_config(config: ServiceConfig) -> ServiceConfig:
    level = config.log_level.upper()
    if level not in LOG_LEVELS:
        raise InvalidParameter(f"log_level must be one of {'/'.join(LOG_LEVELS)}: {config.log_level!r}")
    return replace(config, log_level=level)


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Tuple[ProgramConfig, ServiceConfig]:
    """Load program and service settings.

    Values come from the dataclass defaults, then the optional YAML file
    (``program:`` and ``service:`` sections), then environment variables.
    """
    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    if path is not None:
        with Path(path).open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise InvalidParameter(f"config file {path} must contain a mapping")

    program = _build(ProgramConfig, raw.get("program", {}), env, PROGRAM_ENV)
    service = _build(ServiceConfig, raw.get("service", {}), env, SERVICE_ENV)
    return validate_program_config(program), validate_service_config(service)
