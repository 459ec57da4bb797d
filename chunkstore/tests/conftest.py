"""
Shared fixtures: an in-memory relay, a virtual clock for backoff sleeps, and
an in-memory ledger reader.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

import pytest

from chunkstore.config import RetryConfig, StoreConfig, load_config
from chunkstore.errors import RelayError
from chunkstore.tx.types import ContractCall, PreparedTransaction, TxType
from chunkstore.utils.bytes import hex_to_text

OPERATOR = "0x" + "ab" * 20
OTHER_OPERATOR = "0x" + "cd" * 20


class FakeClock:
    """Virtual time; `sleep` advances it instantly and records the delay."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


PlanStep = Union[BaseException, Set[str]]


class FakeRelay:
    """
    Scripted relay. Each submit consumes one plan step:
      - an exception instance is raised,
      - a set of ids fails every call whose first argument is in the set.
    Once the plan is exhausted every call succeeds.
    """

    def __init__(self, plan: Sequence[PlanStep] = (), clock: Optional[FakeClock] = None,
                 wallet: str = OPERATOR) -> None:
        self.plan = list(plan)
        self.clock = clock
        self.wallet = wallet
        self.calls: List[List[ContractCall]] = []
        self.times: List[float] = []

    async def submit(self, calls: Sequence[ContractCall]) -> Dict[str, Any]:
        self.calls.append(list(calls))
        self.times.append(self.clock.now if self.clock else 0.0)
        step = self.plan.pop(0) if self.plan else set()
        if isinstance(step, BaseException):
            raise step
        ok: List[int] = []
        failed: List[int] = []
        for i, call in enumerate(calls):
            (failed if call.args[0] in step else ok).append(i)
        return {
            "transactionHashes": [f"0xhash{len(self.calls)}_{i}" for i in ok],
            "successfulIndexes": ok,
            "failedIndexes": failed,
            "errors": [{"index": i, "error": "rejected"} for i in failed],
            "backendWalletAddress": self.wallet,
        }


class FakeReader:
    """In-memory view of both storage contracts, keyed by (id, operator)."""

    def __init__(self) -> None:
        self.values: Dict[Tuple[str, str], str] = {}
        self.chunks: Dict[Tuple[str, str], List[str]] = {}
        self.broken: Set[str] = set()

    def store(self, transactions: Sequence[PreparedTransaction], operator: str = OPERATOR) -> None:
        """Apply prepared writes as if they had landed on the ledger."""
        for tx in transactions:
            if tx.type is TxType.CHUNKED:
                self.chunks[(tx.id, operator)] = list(tx.call.args[2])
            else:
                self.values[(tx.id, operator)] = hex_to_text(tx.call.args[2])

    async def get_value(self, slot_id: str, operator: str) -> Optional[str]:
        return self.values.get((slot_id, operator))

    async def get_chunks(self, chunk_id: str, operator: str) -> Optional[List[str]]:
        if chunk_id in self.broken:
            raise RelayError("rpc unavailable")
        return self.chunks.get((chunk_id, operator))


@pytest.fixture(autouse=True)
def _fresh_config():
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_relay(clock):
    def _make(*plan: PlanStep, wallet: str = OPERATOR) -> FakeRelay:
        return FakeRelay(plan, clock=clock, wallet=wallet)

    return _make


@pytest.fixture
def reader() -> FakeReader:
    return FakeReader()


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(initial_delay=1.0, max_delay=30.0, backoff_multiplier=2.0, max_retries=3)


@pytest.fixture
def store_config(retry_config) -> StoreConfig:
    return StoreConfig(retry=retry_config)


@pytest.fixture
def operator() -> str:
    return OPERATOR


@pytest.fixture
def other_operator() -> str:
    return OTHER_OPERATOR
