"""
tests/test_aws_ecs.py - appstatus/aws/ecs.py 테스트
"""

from datetime import datetime, timezone

import pytest

from appstatus.aws.ecs import ECS, Image, Service, ServiceArn, Task, TaskStatus, task_id
from appstatus.exceptions import APICallError, AppStatusError, ARNParseError
from conftest import create_failing_pages, create_mock_client_error

SERVICE_ARN = "arn:aws:ecs:us-west-2:123456789012:service/my-project-test-Cluster-9F7Y0RLP60R7/my-project-test-myService-JSOH5GYBFAIB"
TASK_ARN = "arn:aws:ecs:us-west-2:123456789012:task/my-cluster/4082490ee6c245e09d2145010aa1ba8d"

STARTED = datetime(2020, 3, 13, 19, 50, 30, tzinfo=timezone.utc)
STOPPED = datetime(2020, 3, 13, 20, 0, 30, tzinfo=timezone.utc)


class TestServiceArn:
    """ServiceArn 파싱 테스트"""

    def test_cluster_and_service_name(self):
        arn = ServiceArn(SERVICE_ARN)
        assert arn.cluster_name() == "my-project-test-Cluster-9F7Y0RLP60R7"
        assert arn.service_name() == "my-project-test-myService-JSOH5GYBFAIB"

    def test_old_format_without_cluster(self):
        """클러스터가 없는 구형 ARN은 파싱 실패"""
        arn = ServiceArn("arn:aws:ecs:us-west-2:123456789012:service/my-service")
        with pytest.raises(ARNParseError, match="cannot parse resource"):
            arn.cluster_name()

    def test_not_an_arn(self):
        with pytest.raises(ARNParseError):
            ServiceArn("not-an-arn").service_name()


class TestTaskID:
    """task_id 함수 테스트"""

    def test_new_format(self):
        assert task_id(TASK_ARN) == "4082490ee6c245e09d2145010aa1ba8d"

    def test_old_format(self):
        assert task_id("arn:aws:ecs:us-west-2:123456789012:task/abcd1234") == "abcd1234"

    def test_invalid(self):
        with pytest.raises(ARNParseError):
            task_id("arn:aws:ecs:us-west-2:123456789012:service/c/s")


class TestServiceStatus:
    """Service.service_status 테스트"""

    def test_uses_primary_deployment(self):
        service = Service(
            {
                "serviceName": "svc",
                "status": "ACTIVE",
                "desiredCount": 2,
                "runningCount": 1,
                "deployments": [
                    {"updatedAt": STARTED, "taskDefinition": "arn:aws:ecs:us-west-2:1:task-definition/app:5"},
                    {"updatedAt": STOPPED, "taskDefinition": "arn:aws:ecs:us-west-2:1:task-definition/app:4"},
                ],
            }
        )

        status = service.service_status()

        assert status.status == "ACTIVE"
        assert status.desired_count == 2
        assert status.running_count == 1
        assert status.last_deployment_at == int(STARTED.timestamp())
        assert status.task_definition.endswith("app:5")

    def test_to_dict_keys(self):
        status = Service({"status": "DRAINING", "deployments": []}).service_status()
        assert list(status.to_dict()) == [
            "desiredCount",
            "runningCount",
            "status",
            "lastDeploymentAt",
            "taskDefinition",
        ]
        assert status.last_deployment_at == 0


class TestTaskStatus:
    """Task.task_status 테스트"""

    def test_running_task(self):
        task = Task(
            {
                "taskArn": TASK_ARN,
                "healthStatus": "HEALTHY",
                "lastStatus": "RUNNING",
                "startedAt": STARTED,
                "containers": [
                    {"image": "repo/app:latest", "imageDigest": "sha256:18f7eb6cff6e63e5f5273fb53f672975fe6044580f66c354f55d2de8dd28aec7"},
                ],
            }
        )

        status = task.task_status()

        assert status == TaskStatus(
            health="HEALTHY",
            id="4082490ee6c245e09d2145010aa1ba8d",
            images=[Image(id="repo/app:latest", digest="18f7eb6cff6e63e5f5273fb53f672975fe6044580f66c354f55d2de8dd28aec7")],
            last_status="RUNNING",
            started_at=int(STARTED.timestamp()),
            stopped_at=0,
            stopped_reason="",
        )
        assert isinstance(status.images, tuple)

    def test_stopped_task_keeps_reason(self):
        task = Task(
            {
                "taskArn": TASK_ARN,
                "lastStatus": "STOPPED",
                "startedAt": STARTED,
                "stoppedAt": STOPPED,
                "stoppedReason": "Essential container in task exited",
                "containers": [],
            }
        )

        status = task.task_status()

        assert status.stopped_at == int(STOPPED.timestamp())
        assert status.stopped_reason == "Essential container in task exited"
        assert status.health == ""

    def test_bad_arn(self):
        with pytest.raises(ARNParseError):
            Task({"taskArn": "bad"}).task_status()


class TestECSClient:
    """ECS 래퍼 테스트"""

    def test_service(self, mock_ecs_client):
        mock_ecs_client.describe_services.return_value = {
            "services": [{"serviceName": "svc", "status": "ACTIVE"}],
            "failures": [],
        }

        service = ECS(mock_ecs_client).service("cluster", "svc")

        assert service.service_name == "svc"
        mock_ecs_client.describe_services.assert_called_once_with(cluster="cluster", services=["svc"])

    def test_service_not_found(self, mock_ecs_client):
        mock_ecs_client.describe_services.return_value = {
            "services": [],
            "failures": [{"reason": "MISSING"}],
        }

        with pytest.raises(AppStatusError, match="cannot find service svc"):
            ECS(mock_ecs_client).service("cluster", "svc")

    def test_service_api_error(self, mock_ecs_client):
        mock_ecs_client.describe_services.side_effect = create_mock_client_error("ClusterNotFoundException")

        with pytest.raises(APICallError) as exc_info:
            ECS(mock_ecs_client).service("cluster", "svc")

        assert exc_info.value.error_code == "ClusterNotFoundException"

    def test_service_tasks_paginates_and_batches(self, mock_ecs_client):
        """ListTasks 페이지를 모두 모은 뒤 100개 단위로 DescribeTasks"""
        arns = [f"arn:aws:ecs:us-west-2:1:task/c/{i:032x}" for i in range(150)]
        mock_paginator = mock_ecs_client.get_paginator.return_value
        mock_paginator.paginate.return_value = [
            {"taskArns": arns[:100]},
            {"taskArns": arns[100:]},
        ]
        mock_ecs_client.describe_tasks.side_effect = lambda cluster, tasks: {
            "tasks": [{"taskArn": arn} for arn in tasks]
        }

        tasks = ECS(mock_ecs_client).service_tasks("c", "svc")

        assert [t.task_arn for t in tasks] == arns
        mock_ecs_client.get_paginator.assert_called_once_with("list_tasks")
        mock_paginator.paginate.assert_called_once_with(cluster="c", serviceName="svc")
        batch_sizes = [len(c.kwargs["tasks"]) for c in mock_ecs_client.describe_tasks.call_args_list]
        assert batch_sizes == [100, 50]

    def test_service_tasks_list_error(self, mock_ecs_client):
        """ListTasks 도중 실패하면 DescribeTasks 없이 예외"""
        mock_ecs_client.get_paginator.return_value.paginate.return_value = create_failing_pages(
            [{"taskArns": [TASK_ARN]}],
            create_mock_client_error("ClusterNotFoundException"),
        )

        with pytest.raises(APICallError, match="^list running tasks: "):
            ECS(mock_ecs_client).service_tasks("c", "svc")

        mock_ecs_client.describe_tasks.assert_not_called()

    def test_service_tasks_describe_error(self, mock_ecs_client):
        mock_ecs_client.get_paginator.return_value.paginate.return_value = [{"taskArns": [TASK_ARN]}]
        mock_ecs_client.describe_tasks.side_effect = create_mock_client_error("AccessDeniedException")

        with pytest.raises(APICallError, match="^describe running tasks: "):
            ECS(mock_ecs_client).service_tasks("c", "svc")

    def test_service_tasks_empty(self, mock_ecs_client):
        assert ECS(mock_ecs_client).service_tasks("c", "svc") == []
        mock_ecs_client.describe_tasks.assert_not_called()
