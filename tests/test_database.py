import asyncio
from concurrent.futures import ThreadPoolExecutor

from whisperbox import database


def test_engine_is_created_once(db_path):
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            engines = list(pool.map(lambda _: database.get_engine(), range(32)))
        assert all(engine is engines[0] for engine in engines)
        assert str(engines[0].url).endswith("whisperbox.db")
    finally:
        asyncio.run(database.dispose_engine())


def test_dispose_resets_engine(db_path):
    first = database.get_engine()
    asyncio.run(database.dispose_engine())
    second = database.get_engine()
    try:
        assert first is not second
    finally:
        asyncio.run(database.dispose_engine())
