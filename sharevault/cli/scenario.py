"""
sharevault.cli.scenario
-----------------------

Run a JSON scenario against a fresh in-memory vault.

A scenario is either a list of steps or an object:

    {
      "vault": {"name": "Vault Shares", "symbol": "vSHR", "decimals": 18},
      "steps": [
        {"op": "mint_asset", "to": "alice", "amount": 1000},
        {"op": "deposit", "assets": 100, "receiver": "alice", "caller": "alice"},
        {"op": "approve", "from": "alice", "spender": "bob", "amount": "unlimited"},
        {"op": "redeem", "shares": 40, "receiver": "bob", "owner": "alice", "caller": "bob"}
      ]
    }

Addresses are short labels mapped to 32-byte addresses with SHA3-256
(`derive_address`). The labels "vault" and "asset-token" resolve to the vault
and the asset token themselves. Steps run in order; the first failing step
stops the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..config import VaultConfig
from ..errors import VaultError
from ..math import UNLIMITED
from ..runtime.address import derive_address, to_hex
from ..runtime.custodian import InMemoryAssetToken
from ..runtime.env import Env
from ..vault.operations import Vault

log = logging.getLogger(__name__)

DEFAULT_VAULT_META = {"name": "Vault Shares", "symbol": "vSHR", "decimals": 18}


class ScenarioError(VaultError):
    def __init__(self, message: str, *, step: Optional[int] = None, **extra: Any):
        data: Dict[str, Any] = {}
        if step is not None:
            data["step"] = step
        data.update(extra)
        super().__init__(message=message, code="SCENARIO_INVALID", data=data or None)


@dataclass
class ScenarioResult:
    ok: bool = True
    steps: List[Dict[str, Any]] = field(default_factory=list)
    failed: Optional[Dict[str, Any]] = None
    accounts: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    total_supply: int = 0
    total_assets: int = 0
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "steps": self.steps,
            "failed": self.failed,
            "accounts": self.accounts,
            "total_supply": self.total_supply,
            "total_assets": self.total_assets,
            "events": self.events,
        }


class ScenarioRunner:
    """Holds the env, asset token and vault for one run, plus the label book."""

    def __init__(self, meta: Optional[Mapping[str, Any]] = None, config: Optional[VaultConfig] = None) -> None:
        self.env = Env(config=config)
        self.token = InMemoryAssetToken(self.env)
        self.vault = Vault(self.env)
        self.labels: Dict[str, bytes] = {}
        m = dict(DEFAULT_VAULT_META)
        m.update(meta or {})
        self.vault.initialize(self.token.address, m["name"], m["symbol"], m["decimals"])
        self._ops: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "mint_asset": self._mint_asset,
            "deposit": self._deposit,
            "mint": self._mint,
            "withdraw": self._withdraw,
            "redeem": self._redeem,
            "transfer": self._transfer,
            "approve": self._approve,
            "transfer_from": self._transfer_from,
        }

    # --- argument helpers ----------------------------------------------------

    def addr(self, label: Any) -> bytes:
        if not isinstance(label, str) or not label:
            raise ScenarioError("address labels must be non-empty strings", label=repr(label))
        if label not in self.labels:
            self.labels[label] = derive_address(label)
        return self.labels[label]

    def _opt_addr(self, step: Mapping[str, Any], key: str) -> Optional[bytes]:
        return self.addr(step[key]) if step.get(key) is not None else None

    @staticmethod
    def _amount(value: Any) -> Any:
        if value == "unlimited":
            return UNLIMITED
        return value

    # --- operations ----------------------------------------------------------

    def _mint_asset(self, s: Mapping[str, Any]) -> Any:
        self.token.mint(self.addr(s["to"]), self._amount(s["amount"]))
        return None

    def _deposit(self, s: Mapping[str, Any]) -> Any:
        return self.vault.deposit(s["assets"], self.addr(s["receiver"]), caller=self._opt_addr(s, "caller"))

    def _mint(self, s: Mapping[str, Any]) -> Any:
        return self.vault.mint(s["shares"], self.addr(s["receiver"]), caller=self._opt_addr(s, "caller"))

    def _withdraw(self, s: Mapping[str, Any]) -> Any:
        return self.vault.withdraw(
            s["assets"], self.addr(s["receiver"]), self.addr(s["owner"]), caller=self._opt_addr(s, "caller")
        )

    def _redeem(self, s: Mapping[str, Any]) -> Any:
        return self.vault.redeem(
            s["shares"], self.addr(s["receiver"]), self.addr(s["owner"]), caller=self._opt_addr(s, "caller")
        )

    def _transfer(self, s: Mapping[str, Any]) -> Any:
        return self.vault.transfer(self.addr(s["from"]), self.addr(s["to"]), self._amount(s["amount"]))

    def _approve(self, s: Mapping[str, Any]) -> Any:
        return self.vault.approve(self.addr(s["from"]), self.addr(s["spender"]), self._amount(s["amount"]))

    def _transfer_from(self, s: Mapping[str, Any]) -> Any:
        return self.vault.transfer_from(
            self.addr(s["spender"]), self.addr(s["from"]), self.addr(s["to"]), self._amount(s["amount"])
        )

    # --- driver --------------------------------------------------------------

    def step(self, index: int, step: Any) -> Any:
        if not isinstance(step, Mapping):
            raise ScenarioError("each step must be an object", step=index)
        op = step.get("op")
        handler = self._ops.get(op) if isinstance(op, str) else None
        if handler is None:
            raise ScenarioError(f"unknown op {op!r}", step=index, known=sorted(self._ops))
        try:
            return handler(step)
        except KeyError as e:
            raise ScenarioError(f"step is missing field {e.args[0]!r}", step=index, op=op) from e

    def snapshot(self, result: ScenarioResult) -> ScenarioResult:
        for label, a in sorted(self.labels.items()):
            result.accounts[label] = {
                "address": to_hex(a),
                "shares": self.vault.balance_of(a),
                "assets": self.token.balance(a),
            }
        result.total_supply = self.vault.total_supply()
        result.total_assets = self.vault.total_assets()
        result.events = [e.to_dict() for e in self.env.events.events()]
        return result


def load_steps(doc: Any) -> Tuple[Mapping[str, Any], List[Any]]:
    """Split a parsed scenario document into (vault meta, steps)."""
    if isinstance(doc, list):
        return {}, doc
    if isinstance(doc, Mapping):
        steps = doc.get("steps", [])
        meta = doc.get("vault", {})
        if not isinstance(steps, list) or not isinstance(meta, Mapping):
            raise ScenarioError("scenario needs a 'steps' list and an optional 'vault' object")
        return meta, steps
    raise ScenarioError("scenario must be a list of steps or an object with 'steps'")


def run_scenario(doc: Any, config: Optional[VaultConfig] = None) -> ScenarioResult:
    """
    Run every step of `doc` and return the outcome.

    Vault errors stop the run and are recorded in `result.failed`; a malformed
    scenario (unknown op, missing field) is reported the same way.
    """
    meta, steps = load_steps(doc)
    runner = ScenarioRunner(meta, config=config)
    result = ScenarioResult()
    for i, step in enumerate(steps):
        op = step.get("op") if isinstance(step, Mapping) else None
        try:
            out = runner.step(i, step)
        except VaultError as e:
            log.info("scenario step %d (%s) failed: %s", i, op, e)
            result.ok = False
            result.failed = {"index": i, "op": op, "error": e.to_dict()}
            break
        result.steps.append({"index": i, "op": op, "result": out})
    return runner.snapshot(result)


__all__ = ["ScenarioError", "ScenarioResult", "ScenarioRunner", "load_steps", "run_scenario"]
