"""
Video Mapper App - Native Brightcove Video to Content Publication Event

Responsibilities:
- Subscribe to Redis Pub/Sub channel: NativeCmsPublicationEvents
- Drop messages not originating from Brightcove (Origin-System-Id header)
- Validate the native video record (uuid, id, updated_at required; name optional)
- Build the canonical payload and wrap it in a publication event
- Publish the event to Redis Pub/Sub with the inbound headers forwarded
- Serve the same mapping synchronously over HTTP (POST /map)

Outputs:
- Redis events:
  - channel=CmsPublicationEvents, payload={headers, body}
"""
