import logging

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import (
    HTMLResponse,
    PlainTextResponse,
    RedirectResponse,
    Response,
)
from starlette.routing import Route

from pushbuild.board import STYLE_FILE, render_board
from pushbuild.config import Config, config
from pushbuild.dispatch import Dispatcher
from pushbuild.ledger import ResultLedger
from pushbuild.router import SubmissionRouter
from pushbuild.runner import Pipeline, SubmissionRunner
from pushbuild.runtime import DockerRuntime
from pushbuild.schemas.webhook import PushEvent

logger = logging.getLogger(__name__)


async def submission(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        # Malformed JSON or a body that is not UTF-8
        return PlainTextResponse('Invalid JSON body', 400)
    try:
        event = PushEvent.model_validate(payload)
    except ValidationError as e:
        return PlainTextResponse(str(e), 400)
    logger.debug(f'Received {event!r}')
    result = request.app.state.router.submit(event)
    return PlainTextResponse(result.message)


async def board(request: Request):
    return HTMLResponse(render_board(request.app.state.ledger.snapshot()))


async def style(request: Request):
    return Response(STYLE_FILE.read_text(), media_type='text/css')


async def redirect_to_board(request: Request):
    return RedirectResponse('/board/', 307)


def create_app(
    config: Config,
    ledger: ResultLedger | None = None,
    pipeline: Pipeline | None = None,
) -> Starlette:
    if ledger is None:
        ledger = ResultLedger()
    if pipeline is None:
        pipeline = Pipeline(DockerRuntime(config.container_bin), config.dockerfiles_dir)
    dispatcher = Dispatcher(config.max_parallel_runs)
    router = SubmissionRouter(
        config.repos, ledger, dispatcher, SubmissionRunner(pipeline, ledger)
    )

    app = Starlette(
        debug=config.debug,
        routes=[
            Route('/', redirect_to_board, methods=['GET']),
            Route('/submission', submission, methods=['POST']),
            Route('/board', redirect_to_board, methods=['GET']),
            Route('/board/', board, methods=['GET']),
            Route('/board/style.css', style, methods=['GET']),
        ],
    )
    app.state.ledger = ledger
    app.state.dispatcher = dispatcher
    app.state.router = router
    return app


app = create_app(config)
