"""External data sources: Solana JSON-RPC and DexScreener."""
