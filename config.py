# config.py
import os

# ======= Search backend =======
# "backtracking" (default) or "cp-sat"; CP-SAT falls back to backtracking
# whenever it cannot prove an answer inside its timebox.
SEARCH_BACKEND = os.getenv("PP_SEARCH_BACKEND", "backtracking").strip().lower()

# ======= CP-SAT caps =======
CP_SAT_SECONDS = float(os.getenv("PP_CP_SAT_SECONDS", "30"))
WORKERS        = int(os.getenv("PP_WORKERS", "1"))
MAX_MEMORY_MB  = int(os.getenv("PP_MAX_MEMORY_MB", "2048"))
RANDOM_SEED    = int(os.getenv("PP_RANDOM_SEED", "0"))

# ======= Output names =======
WITNESS_OUT   = os.getenv("PP_WITNESS_OUT", "witness.txt")
LAYOUT_HTML   = os.getenv("PP_LAYOUT_HTML", "layout_view.html")
WRITE_WITNESS = int(os.getenv("PP_WRITE_WITNESS", "1")) != 0

class CFG:
    SEARCH_BACKEND = SEARCH_BACKEND

    CP_SAT_SECONDS = CP_SAT_SECONDS
    WORKERS        = WORKERS
    MAX_MEMORY_MB  = MAX_MEMORY_MB
    RANDOM_SEED    = RANDOM_SEED

    WITNESS_OUT   = WITNESS_OUT
    LAYOUT_HTML   = LAYOUT_HTML
    WRITE_WITNESS = WRITE_WITNESS

__all__ = ["CFG"]
