import json

from channels.generic.websocket import AsyncWebsocketConsumer

from ..authentication import SESSION_KEY
from ..services.tree import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Push a notice to logged-in clients whenever the hospital tree changes."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        session = self.scope.get("session")
        if session is None or not session.get(SESSION_KEY):
            await self.close(code=4003)
            return
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def broadcast_refresh(self, event):
        # event: {"type": "broadcast.refresh", "version": int, "ts": "...", "source": "store" | "merge" | "backup"}
        await self.send(json.dumps(event))
