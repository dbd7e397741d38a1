import pytest

SINGLE_COMPONENT = """
components:
  - name: app
    image: app:1
    ports:
      - name: http
        port: 8080
"""

MULTI_COMPONENT = """
components:
  - name: web
    image: nginx:1.25
    command: [nginx]
    args: ["-g", "daemon off;"]
    env:
      LOG_LEVEL: info
      WORKERS: 4
    resources:
      limits: {cpu: 500m, memory: 256Mi}
      requests: {cpu: 100m, memory: 128Mi}
    ports:
      - name: http
        port: 80
      - name: metrics
        port: 9100
        service: monitoring
    volumes:
      - name: data
        mountPath: /var/lib/data
        size: 1Gi
  - name: worker
    image: registry.example.com:5000/team/worker@sha256:0123456789abcdef0123456789abcdef
    ports:
      - name: grpc
        port: 9000
      - name: worker-metrics
        port: 9101
        service: monitoring
    volumes:
      - name: data
        mountPath: /data
        size: 1Gi
      - name: cache
        mountPath: /cache
        size: 512Mi
        storageClass: fast
"""


@pytest.fixture
def single_component() -> str:
    return SINGLE_COMPONENT


@pytest.fixture
def multi_component() -> str:
    return MULTI_COMPONENT
