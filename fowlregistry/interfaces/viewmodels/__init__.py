"""
Client-side view-models.

Each view-model owns one StateHolder and is driven from a single asyncio
event loop. Blocking use cases run in worker threads via asyncio.to_thread
so the loop stays responsive.
"""
