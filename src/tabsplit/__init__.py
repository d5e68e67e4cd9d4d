"""tabsplit: exact-cent allocation and ledger core for group tabs."""
