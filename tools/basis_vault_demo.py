#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from basisvault import WITHDRAW_ALL, BasisTradingModule, load_config
from basisvault.core import PRECISE_UNIT, FeeState, check_vault
from basisvault.log import setup_logging_to_console
from basisvault.state import (
    InMemoryPerpExchange,
    InMemoryTradingEngine,
    InMemoryVault,
    StaticController,
    TokenBalances,
)

VAULT = "0x" + "11" * 20
MANAGER = "0x" + "22" * 20
FEE_RECIPIENT = "0x" + "33" * 20
PROTOCOL_RECIPIENT = "0x" + "44" * 20
EXCHANGE = "0x" + "55" * 20


def _pct(x: str) -> int:
    """Parse a percentage like "10" or "12.5" into precise units."""
    whole, _, frac = x.partition(".")
    frac = (frac + "0" * 16)[:16]
    return int(whole) * 10**16 + int(frac or "0")


def main() -> int:
    ap = argparse.ArgumentParser(description="Offline walk-through of funding settlement and fee withdrawal.")
    ap.add_argument("--config", type=Path, default=ROOT / "config" / "example_module.yaml")
    ap.add_argument("--supply", type=int, default=1_000, help="vault token supply (whole tokens)")
    ap.add_argument("--collateral", type=int, default=10_000, help="collateral deposited at the exchange (whole tokens)")
    ap.add_argument("--funding", type=int, default=1_000, help="funding owed to the vault (whole tokens)")
    ap.add_argument("--fee", type=_pct, default=_pct("10"), help="performance fee percentage")
    ap.add_argument("--protocol-split", type=_pct, default=_pct("20"), help="protocol share of the fee, percentage")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    setup_logging_to_console(logging.DEBUG if args.verbose else logging.INFO)
    cfg = load_config(args.config)
    token_unit = 10**cfg.collateral_decimals

    balances = TokenBalances()
    vault = InMemoryVault(address=VAULT, manager=MANAGER, balances=balances, supply=args.supply * PRECISE_UNIT)
    exchange = InMemoryPerpExchange(
        address=EXCHANGE,
        collateral_token=cfg.collateral_token,
        collateral_decimals=cfg.collateral_decimals,
        balances=balances,
    )
    controller = StaticController(
        fee_recipient=PROTOCOL_RECIPIENT,
        fee_splits={(cfg.module_id, cfg.protocol_performance_fee_index): args.protocol_split},
    )
    module = BasisTradingModule(
        cfg,
        trading=InMemoryTradingEngine(exchange, cfg.module_id),
        exchange=exchange,
        controller=controller,
    )

    vault.add_module(cfg.module_id)
    module.initialize(
        vault,
        FeeState(
            fee_recipient=FEE_RECIPIENT,
            max_performance_fee_percentage=max(args.fee, _pct("20")),
            performance_fee_percentage=args.fee,
        ),
        caller=MANAGER,
    )

    collateral = args.collateral * token_unit
    balances.mint(VAULT, cfg.collateral_token, collateral)
    exchange.deposit(VAULT, collateral)
    vault.set_external_position_unit(
        cfg.collateral_token, cfg.module_id, collateral * PRECISE_UNIT // vault.total_supply(),
    )

    exchange.accrue_funding(VAULT, -args.funding * PRECISE_UNIT)
    print(f"[basis-demo] pending funding preview: {module.get_updated_settled_funding(vault)}")

    adj = module.get_redemption_adjustments(vault, PRECISE_UNIT)
    print(f"[basis-demo] redemption adjustments per token: {dict(zip(adj.components, adj.equity_adjustments))}")

    result = module.withdraw_funding_and_accrue_fees(vault, WITHDRAW_ALL, caller=MANAGER)
    print(
        f"[basis-demo] withdrawn={result.amount_withdrawn} manager_fee={result.manager_fee} "
        f"protocol_fee={result.protocol_fee}"
    )
    print(f"[basis-demo] settled funding after: {module.settled_funding.get(VAULT)}")
    print(f"[basis-demo] default unit after: {vault.get_default_position_unit(cfg.collateral_token)}")

    short = check_vault(vault)
    if short:
        print(f"[basis-demo] FAIL: undercollateralized components {short}")
        return 1
    print("[basis-demo] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
