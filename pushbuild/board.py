from html import escape
from pathlib import Path

from pushbuild.schemas import (
    InProgress,
    LogEntry,
    LogResult,
    Output,
    Passed,
    SetupFailed,
    TestError,
)

STYLE_FILE = Path(__file__).parent / 'static' / 'style.css'

PAGE = '''\
<html>
    <head>
        <meta charset='utf-8' />
        <link rel='stylesheet' href='./style.css' />
    </head>
    <body>
        <h1> Test Results </h1>
        <table>
        <tr><th>Submission</th><th>Repo</th><th>Branch</th><th>Result</th></tr>
        {rows}
        </table>
    </body>
</html>
'''

ROW = '''
            <tr>
                <td><a id='submission{index}' href='#submission{index}'>{index}</a></td>
                <td>{repo}</td>
                <td>{branch}</td>
                <td>
                    <input id='submission{index}result' class='visToggle' type='checkbox'>
                    <label for='submission{index}result' class='show'>[Show]</label>
                    <label for='submission{index}result' class='hide'>[Hide]</label>
                    <div>{result}</div>
                </td>
            </tr>'''


def render_output(output: Output) -> str:
    return (
        f'Stdout:<br />\n<pre>\n{escape(output.stdout)}\n</pre><br />\n'
        f'Stderr:<br />\n<pre>\n{escape(output.stderr)}\n</pre>\n'
    )


def _summary(title: str) -> str:
    return f"<span class='summary'>{title}</span>"


def render_result(result: LogResult) -> str:
    match result:
        case InProgress():
            return _summary('In Progress')
        case Passed(output=output):
            return (
                f"{_summary('Success')}<span>:</span><br />\n<div>\n"
                f'{render_output(output)}\n</div>'
            )
        case SetupFailed(error_kind=kind, message=message, output=output):
            body = f'{escape(kind.value)}: {escape(message)}\n'
            if output is not None:
                body += render_output(output)
            return f"{_summary('Setup Error')}<span>:</span><br />\n<div>\n{body}</div>"
        case TestError(run_log=run_log, test_log=test_log):
            body = ''
            if run_log is not None:
                body += 'Run:<br />\n' + render_output(run_log) + '\n'
            if test_log is not None:
                body += 'Test:<br />\n' + render_output(test_log)
            return f"{_summary('Test Error')}<span>:</span><br />\n<div>\n{body}</div>"
    raise TypeError(f'Unknown result {result!r}')


def render_board(entries: list[LogEntry]) -> str:
    rows = ''.join(
        ROW.format(
            index=index,
            repo=escape(entry.repository),
            branch=escape(entry.branch),
            result=render_result(entry.result),
        )
        for index, entry in reversed(list(enumerate(entries)))
    )
    return PAGE.format(rows=rows)
