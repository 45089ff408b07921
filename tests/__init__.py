# =============================================================================
# REALM BEOBACHTER - TEST SUITE
# =============================================================================
#
# Struktur:
#   tests/
#     unit/           - Unit Tests (Decoder, Client, Filter, Windows, Config)
#     integration/    - Integration Tests (Tick, Dispatch, CLI)
#     mock_data.py    - Builders fuer Accounts und Snapshots
#
# Usage:
#   pytest tests/
#
# =============================================================================
