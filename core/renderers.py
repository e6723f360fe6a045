"""
Core: Response Renderer

Wraps all successful responses in the standard envelope:
  { "success": true, "data": ... }

@file core/renderers.py
"""

from rest_framework.renderers import JSONRenderer


class StandardJSONRenderer(JSONRenderer):
    """Wraps successful API responses in a consistent envelope."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        if response is not None and response.status_code >= 400:
            return super().render(data, accepted_media_type, renderer_context)

        # Views that already built an envelope (acknowledgements) pass through.
        if isinstance(data, dict) and 'success' in data:
            return super().render(data, accepted_media_type, renderer_context)

        envelope = {
            'success': True,
            'data': data,
        }
        return super().render(envelope, accepted_media_type, renderer_context)
