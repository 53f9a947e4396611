from shopgenie.config import settings

def money(v: float) -> str:
    return f"{v:.{settings.decimals}f} {settings.currency}"

def shipping_label(v: float) -> str:
    return "Free" if v == 0 else money(v)
