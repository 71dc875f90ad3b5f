"""
성능 모니터링 미들웨어/메트릭 수집기 테스트
"""

from app.middleware.performance_monitoring import MetricsCollector


class TestMetricsCollector:
    def test_summary(self):
        # Given
        collector = MetricsCollector()

        # When
        collector.record_request("/v1/stations", "GET", 200, 10.0)
        collector.record_request("/v1/stations", "GET", 200, 30.0, is_slow=True)
        collector.record_request("/v1/routes/metro-network", "GET", 500, 5.0)

        # Then
        summary = collector.get_summary()
        assert summary["total_requests"] == 3
        assert summary["average_elapsed_time_ms"] == 15.0
        assert summary["slow_requests"] == 1
        assert summary["server_errors"] == 1
        assert summary["success_rate"] == 66.67

    def test_client_errors_are_not_server_errors(self):
        collector = MetricsCollector()

        collector.record_request("/v1/admin/login", "POST", 401, 1.0)

        assert collector.get_summary()["server_errors"] == 0

    def test_path_stats_ranked_by_count(self):
        collector = MetricsCollector()
        for _ in range(3):
            collector.record_request("/v1/routes", "GET", 200, 2.0)
        collector.record_request("/v1/stations", "GET", 200, 4.0)

        stats = collector.get_path_stats(top_n=1)

        assert stats == [
            {
                "path": "GET /v1/routes",
                "count": 3,
                "avg_time_ms": 2.0,
                "slow_count": 0,
                "error_count": 0,
            }
        ]

    def test_empty(self):
        summary = MetricsCollector().get_summary()

        assert summary["total_requests"] == 0
        assert summary["success_rate"] == 0


class TestPerformanceMiddleware:
    def test_process_time_header(self, client):
        response = client.get("/")

        assert "x-process-time-ms" in response.headers

    def test_route_template_used_for_stats(self, client):
        """id가 다른 요청도 같은 라우트 패턴으로 집계"""
        from app.middleware.performance_monitoring import get_metrics_collector

        collector = get_metrics_collector()
        collector.reset()

        client.get("/v1/stations/not-a-uuid-1")
        client.get("/v1/stations/not-a-uuid-2")

        paths = {p["path"]: p["count"] for p in collector.get_path_stats()}
        assert paths["GET /v1/stations/{station_id}"] == 2
