"""
Shared configuration for unit tests.

Unit tests never touch the network: RPC and Jupiter are replaced by the
fakes in unit_test/fakes.py or by httpx.MockTransport.
"""

import os
import sys
from pathlib import Path

# Add project root and the unit test helpers to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent / "unit_test"))

# Keep a developer's wallet out of test runs
os.environ.pop("WALLET_PRIVATE_KEY", None)
