"""Render-lifecycle signals fired once per request by AssetQueueMiddleware."""

from django.dispatch import Signal

# kwargs: page (resolved admin view name), registry (AssetQueue)
admin_enqueue_assets = Signal()

# kwargs: registry (AssetQueue)
public_enqueue_assets = Signal()
