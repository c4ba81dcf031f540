"""
编译器前端主程序入口
"""

import sys

import click

from modules.toy_compiler.pipeline import STATUS_SUCCESS, STATUS_LEXICAL_ERROR
from modules.toy_compiler.rule.rules import COMMENT_POLICIES
from src.api.compiler_api import CompilerAPI
from src.core.exporter.token_exporter import TokenExporter
from src.frontend.cli import ToyShell, print_analysis, print_tokens
from src.utils.constants import COMMENT_POLICY, DEFAULT_HOST, DEFAULT_PORT
from src.utils.exceptions import ExportError, SourceTooLargeError
from src.utils.logging import get_logger, set_level

# 退出码
EXIT_OK = 0
EXIT_LEXICAL_ERROR = 1
EXIT_SYNTAX_ERROR = 2

logger = get_logger("main")


def _run(api_call, source):
    try:
        return api_call(source)
    except SourceTooLargeError as e:
        raise click.ClickException(str(e))


@click.group()
@click.option('--comment-policy', type=click.Choice(COMMENT_POLICIES), default=COMMENT_POLICY,
              show_default=True, help='注释形式：line 为到行尾，delimited 为 //...//')
@click.option('--log-level', default=None, help='日志级别 (DEBUG/INFO/WARNING)')
@click.pass_context
def cli(ctx, comment_policy, log_level):
    """玩具语言编译器前端命令行工具"""
    if log_level:
        set_level(log_level)
    ctx.obj = CompilerAPI(comment_policy)


@cli.command()
@click.argument('source', type=click.File('r', encoding='utf-8'))
@click.option('--unknown-only', is_flag=True, help='只显示 UNKNOWN 记号')
@click.option('--csv', 'csv_path', type=click.Path(dir_okay=False), help='导出记号表为 CSV')
@click.pass_obj
def tokens(api, source, unknown_only, csv_path):
    """词法分析并显示记号表"""
    text = source.read()
    result = _run(api.tokenize, text)
    print_tokens(result['tokens'], unknown_only=unknown_only)
    if csv_path:
        try:
            exporter = TokenExporter(unknown_only=unknown_only)
            count = exporter.export_tokens_to_csv(api.scan(text), csv_path)
        except ExportError as e:
            raise click.ClickException(str(e))
        click.echo(f"exported {count} token(s) to {csv_path}")
    sys.exit(EXIT_OK if result['unknown_count'] == 0 else EXIT_LEXICAL_ERROR)


@cli.command()
@click.argument('source', type=click.File('r', encoding='utf-8'))
@click.option('--tree-out', type=click.Path(dir_okay=False), help='将语法树写入文本文件')
@click.pass_obj
def parse(api, source, tree_out):
    """语法分析并显示语法树"""
    result = _run(api.parse_result, source.read())
    if not result.ok:
        click.echo(f"SYNTAX ERROR: {result.message}")
        sys.exit(EXIT_SYNTAX_ERROR)
    exporter = TokenExporter()
    click.echo(exporter.render_tree(result.ast))
    if tree_out:
        try:
            exporter.export_tree(result.ast, tree_out)
        except ExportError as e:
            raise click.ClickException(str(e))
        click.echo(f"AST written to {tree_out}")
    sys.exit(EXIT_OK)


@cli.command()
@click.argument('source', type=click.File('r', encoding='utf-8'))
@click.option('--no-tokens', is_flag=True, help='不显示记号表')
@click.pass_obj
def analyze(api, source, no_tokens):
    """完整分析：词法错误时停止，否则做语法分析"""
    result = _run(api.analyze, source.read())
    print_analysis(result, show_tokens=not no_tokens)
    if result['status'] == STATUS_SUCCESS:
        sys.exit(EXIT_OK)
    sys.exit(EXIT_LEXICAL_ERROR if result['status'] == STATUS_LEXICAL_ERROR else EXIT_SYNTAX_ERROR)


@cli.command()
@click.pass_obj
def shell(api):
    """启动交互式分析环境"""
    ToyShell(api.comment_policy).start()


@cli.command()
@click.option('--host', default=DEFAULT_HOST, help='服务器主机地址')
@click.option('--port', default=DEFAULT_PORT, help='服务器端口')
@click.option('--debug', is_flag=True, help='启用调试模式')
@click.pass_obj
def web(api, host, port, debug):
    """启动 REST 服务"""
    from src.api.rest_api import create_rest_app
    app = create_rest_app(comment_policy=api.comment_policy)
    logger.info("serving on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)


@cli.command()
def test():
    """运行测试"""
    import subprocess
    sys.exit(subprocess.run([sys.executable, '-m', 'pytest', 'tests/']).returncode)


if __name__ == '__main__':
    cli()
