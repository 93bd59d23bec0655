import os
import tempfile

# Both apps read their settings at import time, so point them at throwaway
# databases before any test module imports them.
_tmpdir = tempfile.mkdtemp(prefix="hotel-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmpdir}/hotel.db"
os.environ["SUPERHERO_DATABASE_URL"] = f"sqlite:///{_tmpdir}/superhero.db"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["SUPERHERO_SECRET_KEY"] = "test-secret"
os.environ["MANAGER_EMAIL"] = "manager@example.com"
os.environ["MANAGER_PASSWORD"] = "manager-pass"
