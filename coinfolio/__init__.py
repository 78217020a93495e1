"""Coinfolio: accounts and personal crypto portfolios backed by CoinMarketCap quotes."""
