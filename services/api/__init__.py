"""
Video Mapper API Service - FastAPI Application

Responsibilities:
- Expose the video mapping synchronously (POST /map)
- Return the serialized publication event in the response body
- Reject malformed bodies, missing headers and missing fields with HTTP 400
- Expose health and readiness probes backed by the broker (/__health, /__gtg)
"""
