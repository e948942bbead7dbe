import json

from channels.generic.websocket import AsyncWebsocketConsumer

from ward.services.notifications import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Fan-out of refresh signals; events carry ids and counters, never patient data."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def patients_changed(self, event):
        # event: {"type": "patients.changed", "ids": [...], "version": int, "ts": "..."}
        await self.send(json.dumps(event))

    async def pendency_reminder(self, event):
        # event: {"type": "pendency.reminder", "pendencies": int, "intervalMinutes": int, "ts": "..."}
        await self.send(json.dumps(event))
