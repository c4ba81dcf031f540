"""
RESTful API接口
提供HTTP接口供外部调用（例如渲染记号表和语法树的前端页面）
"""

from flask import Flask, Response, jsonify, request, g

from modules.toy_compiler.pipeline import STATUS_SUCCESS

from .compiler_api import CompilerAPI
from ..utils.constants import COMMENT_POLICY, MAX_SOURCE_CHARS, DEFAULT_HOST, DEFAULT_PORT
from ..utils.exceptions import SourceTooLargeError
from ..utils.logging import get_logger

logger = get_logger("rest")


def create_rest_app(comment_policy: str = COMMENT_POLICY, max_source_chars: int = MAX_SOURCE_CHARS):
    """创建REST API应用"""
    app = Flask(__name__)
    app.config['COMMENT_POLICY'] = comment_policy
    app.config['MAX_SOURCE_CHARS'] = max_source_chars

    @app.before_request
    def before_request():
        # 每个请求使用独立实例
        g.compiler = CompilerAPI(app.config['COMMENT_POLICY'], app.config['MAX_SOURCE_CHARS'])

    def read_source():
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get('source'), str):
            return None
        return data['source']

    def missing_source():
        return jsonify({'error': 'missing "source" string in JSON body'}), 400

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """健康检查"""
        return jsonify({'status': 'healthy', 'comment_policy': app.config['COMMENT_POLICY']})

    @app.route('/api/tokens', methods=['POST'])
    def tokens():
        """词法分析"""
        source = read_source()
        if source is None:
            return missing_source()
        return jsonify(g.compiler.tokenize(source))

    @app.route('/api/parse', methods=['POST'])
    def parse():
        """语法分析"""
        source = read_source()
        if source is None:
            return missing_source()
        result = g.compiler.parse(source)
        status_code = 200 if result['status'] == STATUS_SUCCESS else 422
        return jsonify(result), status_code

    @app.route('/api/analyze', methods=['POST'])
    def analyze():
        """完整分析"""
        source = read_source()
        if source is None:
            return missing_source()
        result = g.compiler.analyze(source)
        status_code = 200 if result['status'] == STATUS_SUCCESS else 422
        return jsonify(result), status_code

    @app.route('/api/export/csv', methods=['POST'])
    def export_csv():
        """导出记号表为 CSV"""
        source = read_source()
        if source is None:
            return missing_source()
        unknown_only = request.args.get('unknown_only', 'false').lower() in ('1', 'true', 'yes')
        csv_text = g.compiler.export_csv(source, unknown_only=unknown_only)
        return Response(csv_text, mimetype='text/csv',
                        headers={'Content-Disposition': 'attachment; filename=Tokens.csv'})

    @app.errorhandler(SourceTooLargeError)
    def source_too_large(error):
        return jsonify({'error': str(error)}), 413

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'endpoint not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error("internal server error: %s", error)
        return jsonify({'error': 'internal server error'}), 500

    return app


# 命令行启动
if __name__ == '__main__':
    app = create_rest_app()
    app.run(debug=True, host=DEFAULT_HOST, port=DEFAULT_PORT)
