# -*- coding: utf-8 -*-
"""
CLI: `sharevault simulate` and `sharevault version`, plus the scenario runner
they are built on.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import typer.testing

from sharevault.cli.main import app
from sharevault.cli.scenario import ScenarioError, run_scenario
from sharevault.math import UNLIMITED
from sharevault.version import __version__

runner = typer.testing.CliRunner()

SCENARIO = {
    "vault": {"name": "Vault Shares", "symbol": "vSHR", "decimals": 18},
    "steps": [
        {"op": "mint_asset", "to": "alice", "amount": 1000},
        {"op": "deposit", "assets": 200, "receiver": "alice", "caller": "alice"},
        {"op": "withdraw", "assets": 50, "receiver": "alice", "owner": "alice", "caller": "alice"},
        {"op": "approve", "from": "alice", "spender": "bob", "amount": 25},
        {"op": "transfer_from", "spender": "bob", "from": "alice", "to": "carol", "amount": 25},
    ],
}


def _write(tmp_path: Path, doc: Any) -> Path:
    p = tmp_path / "scenario.json"
    p.write_text(json.dumps(doc), encoding="utf-8")
    return p


# ------------------------------ scenario runner -----------------------------


def test_run_scenario_final_state() -> None:
    result = run_scenario(SCENARIO)
    assert result.ok
    assert [s["result"] for s in result.steps] == [None, 200, 50, True, True]
    assert result.accounts["alice"]["shares"] == 125
    assert result.accounts["carol"]["shares"] == 25
    assert result.accounts["bob"]["shares"] == 0
    assert result.accounts["alice"]["assets"] == 850
    assert result.total_supply == 150
    assert result.total_assets == 150
    assert [e["name"] for e in result.events][-1] == "transfer"


def test_run_scenario_stops_at_first_failure() -> None:
    doc = SCENARIO["steps"] + [
        {"op": "transfer_from", "spender": "bob", "from": "alice", "to": "carol", "amount": 1},
        {"op": "deposit", "assets": 1, "receiver": "alice", "caller": "alice"},
    ]
    result = run_scenario(doc)
    assert not result.ok
    assert result.failed["index"] == 5
    assert result.failed["error"]["code"] == "INSUFFICIENT_ALLOWANCE"
    assert result.failed["error"]["number"] == 4
    assert len(result.steps) == 5


def test_unlimited_keyword() -> None:
    result = run_scenario(
        [
            {"op": "mint_asset", "to": "alice", "amount": 100},
            {"op": "deposit", "assets": 100, "receiver": "alice", "caller": "alice"},
            {"op": "approve", "from": "alice", "spender": "bob", "amount": "unlimited"},
            {"op": "redeem", "shares": 40, "receiver": "bob", "owner": "alice", "caller": "bob"},
        ]
    )
    assert result.ok
    assert result.accounts["bob"]["assets"] == 40
    approve = [e for e in result.events if e["name"] == "approve"][0]
    assert approve["data"]["amount"] == UNLIMITED


@pytest.mark.parametrize(
    "step",
    [
        {"op": "explode"},
        {"op": "deposit", "assets": 1},
        {"op": "transfer", "from": "", "to": "bob", "amount": 1},
        "deposit",
    ],
)
def test_malformed_steps_are_reported(step: Any) -> None:
    result = run_scenario([step])
    assert not result.ok
    assert result.failed["error"]["code"] == "SCENARIO_INVALID"


def test_malformed_document() -> None:
    with pytest.raises(ScenarioError):
        run_scenario("not a scenario")
    with pytest.raises(ScenarioError):
        run_scenario({"steps": {}})


# ---------------------------------- CLI -------------------------------------


def test_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "simulate" in result.stdout


def test_version_command() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_simulate_human_output(tmp_path: Path) -> None:
    result = runner.invoke(app, ["simulate", str(_write(tmp_path, SCENARIO))])
    assert result.exit_code == 0, result.stdout
    assert "Total supply:  150" in result.stdout
    assert "alice" in result.stdout


def test_simulate_json_output(tmp_path: Path) -> None:
    result = runner.invoke(app, ["simulate", str(_write(tmp_path, SCENARIO)), "--json"])
    assert result.exit_code == 0, result.stdout
    doc = json.loads(result.stdout)
    assert doc["ok"] is True
    assert doc["total_assets"] == 150


def test_simulate_failing_step_exits_nonzero(tmp_path: Path) -> None:
    doc = [
        {"op": "mint_asset", "to": "alice", "amount": 10},
        {"op": "transfer", "from": "alice", "to": "bob", "amount": 1},
    ]
    result = runner.invoke(app, ["simulate", str(_write(tmp_path, doc))])
    assert result.exit_code == 1
    assert "INSUFFICIENT_BALANCE (3)" in result.stdout


def test_simulate_unreadable_file(tmp_path: Path) -> None:
    bad = tmp_path / "broken.json"
    bad.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["simulate", str(bad)])
    assert result.exit_code == 2


def test_log_level_option(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--log-level", "DEBUG", "simulate", str(_write(tmp_path, SCENARIO)), "--json"])
    assert result.exit_code == 0
