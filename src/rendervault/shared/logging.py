"""
구조적 로깅 시스템 for RenderVault.

이 모듈은 캐시 이벤트와 에러를 컨텍스트 정보와 함께 구조화된 로그로
기록하는 헬퍼 함수들을 제공합니다.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from rendervault.shared.constants import Logging
from rendervault.shared.errors import ErrorContext, RenderVaultError


class StructuredFormatter(logging.Formatter):
    """
    JSON 형태로 구조화된 로그를 출력하는 포맷터.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        로그 레코드를 JSON 형태로 포맷팅합니다.

        Args:
            record: 로깅 레코드

        Returns:
            JSON 형태로 포맷팅된 로그 문자열
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in Logging.EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """
    Rich Console을 생성합니다 (커스텀 테마 포함).

    Returns:
        설정된 Rich Console 인스턴스
    """
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.message": "white",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = Logging.ROOT_LOGGER,
    level: str = Logging.DEFAULT_LEVEL,
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
    console_output: bool = True,
) -> logging.Logger:
    """
    구조화된 로깅을 위한 로거를 설정합니다.

    Args:
        name: 로거 이름 (기본값: "rendervault")
        level: 로그 레벨 (기본값: "INFO")
        log_file: 로그 파일 경로 (선택사항, 항상 JSON 형식)
        use_rich_console: Rich 기반 콘솔 출력 사용 여부 (기본값: True)
        console_output: 콘솔 핸들러 추가 여부 (기본값: True)

    Returns:
        설정된 로거 인스턴스
    """
    logger = logging.getLogger(name)

    # 이미 핸들러가 설정되어 있으면 제거 (중복 방지)
    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    handler: logging.Handler | None = None
    if console_output and use_rich_console:
        handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=True,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format="[%H:%M:%S]",
        )
    elif console_output:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    if handler is not None:
        handler.setLevel(log_level)
        logger.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    # 부모 로거로의 전파 방지 (중복 로그 방지)
    logger.propagate = False

    return logger


def log_operation_error(
    logger: logging.Logger,
    error: RenderVaultError,
    operation: str | None = None,
    additional_context: (dict[str, Any] | ErrorContext) | None = None,
) -> None:
    """
    RenderVaultError 객체를 받아 구조화된 에러 로그를 기록합니다.

    Args:
        logger: 로거 인스턴스
        error: RenderVaultError 객체
        operation: 작업 이름 (선택사항)
        additional_context: 추가 컨텍스트 정보 (선택사항)
    """
    context_dict: dict[str, Any] = error.context.safe_dict()

    if additional_context:
        if isinstance(additional_context, ErrorContext):
            context_dict.update(additional_context.safe_dict())
        else:
            context_dict.update(additional_context)

    logger.error(
        error.message,
        extra={
            "error_code": error.code.value,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """
    성공적인 작업에 대한 디버그 로그를 기록합니다.

    Args:
        logger: 로거 인스턴스
        operation: 작업 이름
        duration_ms: 소요 시간 (밀리초)
        result_info: 결과 정보 (선택사항)
        context: 컨텍스트 정보 (선택사항)
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": context or {},
        },
    )


def log_cache_event(
    logger: logging.Logger,
    event: str,
    component: str,
    cache_key: str | None = None,
    load_time_ns: int | None = None,
) -> None:
    """
    캐시 hit/miss/bypass 이벤트를 디버그 레벨로 기록합니다.

    Args:
        logger: 로거 인스턴스
        event: 이벤트 종류 (hit, miss, bypass)
        component: 컴포넌트 이름
        cache_key: 캐시 키 (선택사항)
        load_time_ns: 렌더링 소요 시간 (나노초, 선택사항)
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    context: dict[str, Any] = {"component": component}
    if cache_key is not None:
        context["cache_key"] = cache_key
    if load_time_ns is not None:
        context["load_time_ns"] = load_time_ns

    logger.debug(
        "Render cache %s for '%s'",
        event,
        component,
        extra={
            "operation": "render_cache",
            "context": context,
        },
    )
