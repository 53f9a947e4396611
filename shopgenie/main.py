import asyncio
import logging
import sys
from typing import List, Optional

from shopgenie.config import settings
from shopgenie.services.advice import AdviceService, AdviceThread
from shopgenie.state.engine import StateEngine
from shopgenie.utils.formatters import money, shipping_label

async def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    with StateEngine() as engine:
        totals = engine.cart_totals()
        print(f"Cart: {engine.cart.count()} item(s)")
        print(f"Subtotal: {money(totals.subtotal)} | Shipping: {shipping_label(totals.shipping)} | Total: {money(totals.total)}")

        query = " ".join(argv or []).strip()
        if query:
            thread = AdviceThread(AdviceService(products=engine.catalog.products))
            reply = await thread.ask(query)
            if reply is not None:
                print(reply.text)

def run() -> None:
    asyncio.run(main(sys.argv[1:]))

if __name__ == "__main__":
    run()
