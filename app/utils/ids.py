from uuid import uuid4

def new_id(prefix: str) -> str:
    # ej: "brd_3f0c..." (prefijo legible + uuid4 hex)
    return f"{prefix}_{uuid4().hex}"
