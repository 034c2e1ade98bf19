"""
aws-app-status

EC2 네트워크 리소스 목록 조회와 ECS 애플리케이션 상태 리포트를 제공합니다.
"""

__version__ = "0.1.0"
