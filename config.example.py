# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "DOIT_APP_NAME": "App display name (default: doit).",
    "DOIT_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Remote persistence (Supabase). Both URL and key set => remote; otherwise local fallback.
    "DOIT_SUPABASE_URL": "Supabase project URL (SUPABASE_URL is accepted too).",
    "DOIT_SUPABASE_ANON_KEY": "Supabase anon key (SUPABASE_ANON_KEY is accepted too).",
    "DOIT_SUPABASE_EMAIL": "Optional: email for password sign-in at startup.",
    "DOIT_SUPABASE_PASSWORD": "Optional: password for password sign-in at startup.",
    # Local persistence (gitignored)
    "DOIT_LOCAL_USER": "Optional fixed local identity; namespaces local keys (doit_<kind>_<user>). Without it the identity from the last local sign-in (doit_current_user) is used.",
    "DOIT_DATA_DIR": "Local data directory (default: .local/doit). Also holds doit.log (rotated).",
    "DOIT_LOCAL_DB_PATH": "Local key-value SQLite path (default: <data_dir>/local_store.sqlite3).",
    "DOIT_SEED_DEFAULTS": "Seed starter habits/categories/tasks on first run (default: true).",
    # Suggestions (OpenRouter / OpenAI-compatible)
    "DOIT_OPENROUTER_API_KEY": "API key; without it suggestions use fixed offline lists.",
    "DOIT_OPENROUTER_BASE_URL": "Base URL (default: https://openrouter.ai/api/v1).",
    "DOIT_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "DOIT_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout for suggestion calls (default: 5).",
    "DOIT_LLM_READ_TIMEOUT_SECONDS": "Read timeout for suggestion calls (default: 25).",
    "DOIT_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "DOIT_APP_TITLE": "Optional OpenRouter metadata header title.",
}
