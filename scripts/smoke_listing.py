# quick offline smoke: throwaway data dir, migrate, create one link, list it
import os
import tempfile

os.environ.setdefault("LINKADMIN_DATA_DIR", tempfile.mkdtemp(prefix="linkadmin-smoke-"))

from linkadmin.admin.web import create_app  # noqa: E402
from linkadmin.config import Settings  # noqa: E402
from linkadmin.db.migrate import upgrade_to_head  # noqa: E402

upgrade_to_head()
app = create_app(Settings(log_file=None))
client = app.test_client()

print(client.get("/admin/?u=https://example.com/smoke&jsonp=yourls").get_json())
print(client.get("/admin/?search=smoke").status_code)
