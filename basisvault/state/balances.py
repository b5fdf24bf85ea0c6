"""
Token balance tracking with deterministic ordering.

Implements TokenBalances[Holder, Token] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
Holder = str  # account or contract address
Token = str  # token address
Amount = int  # Non-negative integer in the token's own decimals


class TokenBalances:
    """
    Balance table mapping (holder, token) -> amount.

    Zero balances are dropped so the table stays sparse.
    """

    def __init__(self):
        self._balances: Dict[Tuple[Holder, Token], Amount] = {}

    def balance_of(self, holder: Holder, token: Token) -> Amount:
        """Get balance for (holder, token). Returns 0 if not found."""
        return self._balances.get((holder, token), 0)

    def set(self, holder: Holder, token: Token, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((holder, token), None)
        else:
            self._balances[(holder, token)] = amount

    def mint(self, holder: Holder, token: Token, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self.set(holder, token, self.balance_of(holder, token) + amount)

    def transfer(self, token: Token, sender: Holder, recipient: Holder, amount: Amount) -> None:
        """
        Move `amount` of `token` from `sender` to `recipient`.

        Raises:
            ValueError: If amount is negative or the sender's balance is insufficient
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        current = self.balance_of(sender, token)
        if amount > current:
            raise ValueError(
                f"ERC20: transfer amount exceeds balance: {amount} > {current}"
            )
        self.set(sender, token, current - amount)
        self.set(recipient, token, self.balance_of(recipient, token) + amount)

    def verify_non_negative(self) -> bool:
        return all(amount >= 0 for amount in self._balances.values())

    def __repr__(self) -> str:
        return f"TokenBalances({len(self._balances)} entries)"
