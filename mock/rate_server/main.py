from decimal import Decimal
from fastapi import FastAPI

app = FastAPI(title="Mock Rate Server", version="1.0.0")

# 1 unit of source currency expressed in the target currency
QUOTES = {
    "CHFIDR": Decimal("17000.12"),
    "EURIDR": Decimal("16950.40"),
    "USDIDR": Decimal("15600.75"),
    "GBPIDR": Decimal("19820.10"),
}


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/live")
def live(source: str, currencies: str, access_key: str = ""):
    pairs = [f"{source}{target}" for target in currencies.split(",")]
    quotes = {pair: float(QUOTES[pair]) for pair in pairs if pair in QUOTES}
    return {"success": True, "source": source, "quotes": quotes}
