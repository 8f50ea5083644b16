import hashlib, logging, secrets, time, httpx
from jose import jwt
from functools import lru_cache
from app.core.config import settings

logger = logging.getLogger(__name__)

JWKS_TTL_SECONDS = 300

@lru_cache(maxsize=1)
def _jwks_cached():
    # Cachea JWKS ~5 min por proceso
    return {"jwks": None, "ts": 0}

async def get_jwks():
    cache = _jwks_cached()
    if not cache["jwks"] or time.time() - cache["ts"] > JWKS_TTL_SECONDS:
        async with httpx.AsyncClient(timeout=5) as client:
            r = await client.get(settings.supabase_jwks_url)
            r.raise_for_status()
            cache["jwks"] = r.json()
            cache["ts"] = time.time()
            logger.info("JWKS refreshed from %s", settings.supabase_jwks_url)
    return cache["jwks"]

async def verify_supabase_token(token: str) -> dict:
    """Verify a Supabase access token and return its claims.

    HS256 tokens are checked against the project JWT secret, RS* tokens
    against the matching key from the project JWKS. Audience and issuer
    are always enforced. Raises on any failure.
    """
    header = jwt.get_unverified_header(token)
    algorithm = header.get("alg", "")

    if algorithm == "HS256":
        # Token firmado con HMAC - usar el JWT secret
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=["HS256"],
            audience=settings.supabase_jwt_audience,
            issuer=settings.jwt_issuer,
        )

    if algorithm.startswith("RS") or algorithm.startswith("ES"):
        # Token firmado con clave asimétrica - usar JWKS
        jwks = await get_jwks()
        key = next((k for k in jwks.get("keys", []) if k.get("kid") == header.get("kid")), None)
        if not key:
            raise ValueError("JWKS key not found")
        return jwt.decode(
            token,
            key,
            algorithms=[key.get("alg", algorithm)],
            audience=settings.supabase_jwt_audience,
            options={"verify_exp": True},
            issuer=settings.jwt_issuer,
        )

    raise ValueError(f"Unsupported algorithm: {algorithm}")

# =========================
# API keys
# =========================

def generate_api_key() -> str:
    # prefijo fijo + 32 bytes aleatorios en hex
    return f"{settings.api_key_prefix}{secrets.token_hex(32)}"

def hash_api_key(api_key: str) -> str:
    return hashlib.sha256(api_key.encode()).hexdigest()

def is_api_key(token: str) -> bool:
    return token.startswith(settings.api_key_prefix)
