from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any

from fastapi import Depends, Request
from starlette.concurrency import run_in_threadpool

from ..config import ForecastConfig
from ..exceptions import ForecastOutputError, ForecastProcessError, ForecastTimeoutError
from ..repositories.interfaces import InventoryRepositoryInterface
from .records_service import get_inventory_repository


logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024
MAX_LOGGED_OUTPUT = 500


class ForecastService:
    """예측 모델을 서브프로세스로 실행하고 그 결과 JSON 을 돌려준다.

    요청마다 새 프로세스를 띄운다. 프로세스와의 계약은 다음이 전부다.

    - stdin 으로 UTF-8 JSON 입력 전체를 받고, stdin 이 닫히면 입력이 끝난 것이다.
    - stdout 으로 UTF-8 JSON 하나를 출력한다. 여러 청크로 나뉘어 와도 된다.
    - stderr 는 진단용이며 응답에 영향을 주지 않는다 (로그로만 남긴다).

    종료 코드와 stdout 파싱 가능 여부는 독립적으로 다룬다. 0 이 아닌 종료 코드는
    경고 로그만 남기고, 출력이 올바른 JSON 이면 그대로 응답한다.
    """

    def __init__(
        self, repo: InventoryRepositoryInterface, config: ForecastConfig
    ) -> None:
        self._repo = repo
        self._config = config

    async def run_forecast(self) -> Any:
        data = await run_in_threadpool(self._repo.prepare_forecast_data)
        payload = json.dumps(data, ensure_ascii=False, default=str).encode("utf-8")
        return await self.run_model(payload)

    async def run_model(self, payload: bytes) -> Any:
        command = self._config.command
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ForecastProcessError(
                f"failed to start forecast model {command!r}: {exc}"
            ) from exc

        logger.info(
            "forecast model started (%d input bytes)",
            len(payload),
            extra={"pid": process.pid},
        )

        # 출력 파이프가 가득 차 모델이 멈추지 않도록 입력을 쓰기 전에 읽기부터 시작한다.
        readers = asyncio.gather(
            _collect_output(process.stdout),
            _log_diagnostics(process.stderr, process.pid),
        )

        try:
            exit_code = await asyncio.wait_for(
                _feed_and_wait(process, payload),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            await _terminate(process, readers)
            logger.error(
                "forecast model timed out after %.1fs",
                self._config.timeout_seconds,
                extra={"pid": process.pid},
            )
            raise ForecastTimeoutError(
                f"forecast model did not exit within {self._config.timeout_seconds}s"
            ) from exc
        except BaseException:
            await _terminate(process, readers)
            raise

        output, _ = await readers

        if exit_code == 0:
            logger.info(
                "forecast model exited (%d output bytes)",
                len(output),
                extra={"pid": process.pid, "exit_code": exit_code},
            )
        else:
            logger.warning(
                "forecast model exited with non-zero code (%d output bytes)",
                len(output),
                extra={"pid": process.pid, "exit_code": exit_code},
            )

        return _parse_output(output, exit_code)


async def _feed_and_wait(process: asyncio.subprocess.Process, payload: bytes) -> int:
    await _write_input(process.stdin, payload)
    return await process.wait()


async def _write_input(stdin: asyncio.StreamWriter | None, payload: bytes) -> None:
    """입력 전체를 쓰고 stdin 을 닫는다. EOF 가 입력 완료 신호다."""

    assert stdin is not None
    try:
        stdin.write(payload)
        await stdin.drain()
    except (BrokenPipeError, ConnectionResetError) as exc:
        # 모델이 입력을 다 읽기 전에 종료한 경우. 판단은 종료 후 출력으로 한다.
        logger.warning("forecast model closed stdin early: %s", exc)
    finally:
        stdin.close()
        with suppress(BrokenPipeError, ConnectionResetError):
            await stdin.wait_closed()


async def _collect_output(stdout: asyncio.StreamReader | None) -> bytes:
    assert stdout is not None
    buffer = bytearray()
    while True:
        chunk = await stdout.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        logger.debug("received %d bytes from forecast model", len(chunk))
    return bytes(buffer)


async def _log_diagnostics(stderr: asyncio.StreamReader | None, pid: int) -> None:
    """stderr 를 한 줄씩 경고 로그로 남긴다. 응답에는 쓰지 않는다."""

    assert stderr is not None
    while True:
        try:
            line = await stderr.readline()
        except ValueError:
            # 버퍼 한도를 넘는 줄은 버려지고 다음 줄부터 이어서 읽는다.
            logger.warning("forecast model stderr line too long, skipped", extra={"pid": pid})
            continue
        if not line:
            break
        text = line.decode("utf-8", errors="replace").rstrip()
        if text:
            logger.warning("forecast model stderr: %s", text, extra={"pid": pid})


async def _terminate(
    process: asyncio.subprocess.Process, readers: asyncio.Future
) -> None:
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
        await process.wait()
    readers.cancel()
    with suppress(asyncio.CancelledError):
        await readers


def _parse_output(output: bytes, exit_code: int) -> Any:
    try:
        return json.loads(output)
    except ValueError as exc:
        snippet = output[:MAX_LOGGED_OUTPUT].decode("utf-8", errors="replace")
        logger.error(
            "forecast model output is not valid JSON: %s (output=%r)",
            exc,
            snippet,
            extra={"exit_code": exit_code},
        )
        raise ForecastOutputError(
            f"invalid forecast output: {exc}", exit_code=exit_code
        ) from exc


def get_forecast_service(
    request: Request,
    repo: InventoryRepositoryInterface = Depends(get_inventory_repository),
) -> ForecastService:
    return ForecastService(repo, request.app.state.config.forecast)
