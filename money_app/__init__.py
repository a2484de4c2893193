"""Money Manager backend: wallets, transactions, budgets and financial analytics."""
