# ================================================================================================================================= #
# ------------------------------------🔑 TRACKER CONSTANTS & SHARED DEFAULTS (NO SIDE EFFECTS)-------------------------------------
# ================================================================================================================================= #


# ================================================================================================================================= #
# [TOKEN] 🔸 ASDF                                                                                                        --SOLANA--
# ================================================================================================================================= #
TOKEN_MINT         = "9zB5wRarXMj86MymwLumSKA1Dx35zPqqKfcZtK1Spump"
TOKEN_TOTAL_SUPPLY = 1_000_000_000

# ---- Wallet / Purchases
TRACKED_WALLET          = "vcGYZbvDid6cRUkCCqcWpBxow73TLpmY6ipmDUtrTF8"
PURCHASE_SOURCE_ADDRESS = "DuhRX5JTPtsWU5n44t8tcFEfmzy2Eu27p4y6z8Rhf2bb"

# ---- Native asset
SOL_MINT         = "So11111111111111111111111111111111111111112"  # wrapped SOL
LAMPORTS_PER_SOL = 10 ** 9


# ================================================================================================================================= #


# ================================================================================================================================= #
# [UPSTREAM] 🔸 HELIUS / COINGECKO / ASDFORECAST                                                                                   --
# ================================================================================================================================= #
HELIUS_RPC_BASE      = "https://mainnet.helius-rpc.com/"
HELIUS_ENHANCED_BASE = "https://api-mainnet.helius-rpc.com/v0"
COINGECKO_BASE       = "https://api.coingecko.com/api/v3"
FORECAST_API_DEFAULT = "https://asdforecast.onrender.com"

# ---- Enhanced transaction pagination
TX_PAGE_SIZE = 100   # limit per request, smaller page = end of history
TX_MAX_PAGES = 20    # hard cap

# ---- Historical price series
PRICE_RANGE_PAD_SECONDS = 60 * 60
PRICE_MEMO_MAX_AGE      = 60 * 60 * 6
PRICE_MEMO_DEFAULT_PATH = "data/sol_price_history.json"


# ================================================================================================================================= #


# ================================================================================================================================= #
# [FETCH] 🔸 BACKOFF                                                                                                               --
# ================================================================================================================================= #
BACKOFF_MAX_RETRIES     = 5
BACKOFF_RETRY_BASE_MS   = 1000   # 429 / 5xx
BACKOFF_NETWORK_BASE_MS = 500   # transport errors
BACKOFF_JITTER_MS       = 500
REQUEST_TIMEOUT         = 30


# ================================================================================================================================= #


# ================================================================================================================================= #
# [CACHE] 🔸 SCHEDULER                                                                                                             --
# ================================================================================================================================= #
FAST_CYCLE_SECONDS    = 60        # supply + wallet + forecast
PRICE_CYCLE_SECONDS   = 60 * 10   # token + SOL spot price
PRICE_STAGGER_SECONDS = 30        # first price run after the heavy lift started

DEFAULT_PORT = 3000
