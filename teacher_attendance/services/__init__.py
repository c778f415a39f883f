"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Schedule resolution and attendance classification are pure functions;
the service singletons orchestrate repositories around them and leave
the commit to the routers.
"""
