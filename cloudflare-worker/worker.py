import httpx
from workers import WorkerEntrypoint  # Official import
import asgi  # ASGI adapter
from contact_relay.core.config import settings_from_bindings
from contact_relay.main import create_app

# Built once per isolate from the worker secrets; asgi.fetch does not run the app lifespan
relay_app = None


def get_relay_app(env):
    global relay_app
    if relay_app is None:
        relay_app = create_app(settings=settings_from_bindings(env), http_client=httpx.AsyncClient())
    return relay_app


class ContactWorker(WorkerEntrypoint):
    async def fetch(self, request):
        return await asgi.fetch(get_relay_app(self.env), request, self.env)


export = ContactWorker()
