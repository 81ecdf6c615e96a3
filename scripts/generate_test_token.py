#!/usr/bin/env python3
"""Generate signed JWTs for poking the API by hand."""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from freight_portal.api.deps import issue_smoke_token
from freight_portal.core.auth import Role

admin_token = issue_smoke_token("admin-test", role=Role.ADMIN, email="admin@lfllogistics.com")
print(f"Admin Token:\n{admin_token}\n")

# Carrier/shipper tokens need the id of a real profile to reach /{role}/profile
profile_id = sys.argv[1] if len(sys.argv) > 1 else None
carrier_token = issue_smoke_token("carrier-test", role=Role.CARRIER, profile_id=profile_id)
print(f"Carrier Token:\n{carrier_token}")
