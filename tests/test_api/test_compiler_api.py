"""
编译器前端 API 测试
"""

import unittest

from modules.toy_compiler.syntax.ast_node import NodeType
from src.api.compiler_api import CompilerAPI
from src.utils.exceptions import LexicalError, ToySyntaxError, SourceTooLargeError


class TestCompilerAPI(unittest.TestCase):

    def setUp(self):
        self.api = CompilerAPI()

    def test_scan(self):
        tokens = self.api.scan("int x;")
        self.assertEqual([t.lexeme for t in tokens], ["int", "x", ";", ""])

    def test_tokenize(self):
        result = self.api.tokenize("x = 1;")
        self.assertEqual(result["status"], "success")
        self.assertEqual(result["unknown_count"], 0)
        self.assertEqual(result["tokens"][2], {"kind": "NUMBER", "lexeme": "1", "offset": 4, "line": 1, "column": 5})
        self.assertGreaterEqual(result["elapsed"], 0)

    def test_parse(self):
        result = self.api.parse("class A { bool f() { return !true; } }")
        self.assertEqual(result["status"], "success")
        self.assertIn("Unary: !", result["tree"])
        self.assertEqual(result["errors"], [])

    def test_parse_error(self):
        result = self.api.parse("class { }")
        self.assertEqual(result["status"], "syntax_error")
        self.assertEqual(result["message"], "[Row 1, Col 7]: Expected class name (found '{', kind DELIMITER)")

    def test_analyze_lexical_error(self):
        result = self.api.analyze('class A { "x }')
        self.assertEqual(result["status"], "lexical_error")
        self.assertIsNone(result["ast"])
        self.assertEqual(result["errors"][0]["error_type"], "UnterminatedString")
        self.assertEqual(result["message"],
                         "[Row 1, Col 11]: Unterminated string literal (found '\"x }', kind UNKNOWN)")

    def test_analyze_or_raise(self):
        ast = self.api.analyze_or_raise("class A {} class B {}")
        self.assertEqual([c.value for c in ast.children_of(NodeType.CLASS_DECL)], ["A", "B"])

        with self.assertRaises(LexicalError) as ctx:
            self.api.analyze_or_raise("class A { @ }")
        self.assertEqual(len(ctx.exception.diagnostics), 1)

        with self.assertRaises(ToySyntaxError) as ctx:
            self.api.analyze_or_raise("class A {")
        self.assertEqual(str(ctx.exception), "[Row 1, Col 10]: Expected '}' (found '', kind END)")
        self.assertEqual(ctx.exception.diagnostic.column, 10)

    def test_comment_policy(self):
        source = "class A { // x // int y; }"
        self.assertEqual(CompilerAPI("delimited").analyze(source)["status"], "success")
        self.assertEqual(CompilerAPI("line").analyze(source)["status"], "syntax_error")

    def test_source_checks(self):
        with self.assertRaises(TypeError):
            self.api.tokenize(None)
        with self.assertRaises(SourceTooLargeError):
            CompilerAPI(max_source_chars=3).parse("class A {}")

    def test_source_limit_counts_characters(self):
        """长度限制按字符计，多字节字符不会被多算"""
        api = CompilerAPI(max_source_chars=4)
        self.assertEqual(api.tokenize('"éé"')["status"], "success")
        with self.assertRaises(SourceTooLargeError):
            api.tokenize('"ééé"')

    def test_parse_result(self):
        result = self.api.parse_result("class A {}")
        self.assertTrue(result.ok)
        self.assertEqual(result.ast.children[0].value, "A")
        failed = self.api.parse_result("class A")
        self.assertFalse(failed.ok)
        self.assertEqual(failed.message, "[Row 1, Col 8]: Expected '{' (found '', kind END)")

    def test_export_csv(self):
        csv_text = self.api.export_csv("a", unknown_only=False)
        self.assertEqual(csv_text, "Kind,Value,Offset,Row,Column\nIDENTIFIER,a,0,1,1\nEND,,1,1,2\n")


if __name__ == "__main__":
    unittest.main()
