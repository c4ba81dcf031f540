"""
词法分析测试
覆盖：记号分类、位置跟踪、数字/字符串/注释规则、UNKNOWN 记号、END 记号不变式
"""

import unittest

from modules.toy_compiler.lexical.lexer import Lexer, tokenize, unknown_tokens, classify_unknown
from modules.toy_compiler.lexical.my_token import Token, TokenType
from modules.toy_compiler.rule.rules import COMMENT_POLICY_DELIMITED


def kinds(tokens):
    return [t.kind for t in tokens]


def lexemes(tokens):
    return [t.lexeme for t in tokens]


class TestLexerBasics(unittest.TestCase):

    def test_class_declaration_tokens(self):
        """记号种类、偏移、行列号"""
        tokens = tokenize("class A { int x; }")
        self.assertEqual(tokens, [
            Token(TokenType.KEYWORD, "class", 0, 1, 1),
            Token(TokenType.IDENTIFIER, "A", 6, 1, 7),
            Token(TokenType.DELIMITER, "{", 8, 1, 9),
            Token(TokenType.KEYWORD, "int", 10, 1, 11),
            Token(TokenType.IDENTIFIER, "x", 14, 1, 15),
            Token(TokenType.DELIMITER, ";", 15, 1, 16),
            Token(TokenType.DELIMITER, "}", 17, 1, 18),
            Token(TokenType.END, "", 18, 1, 19),
        ])

    def test_line_and_column_tracking(self):
        """换行后行号加一、列号归一"""
        tokens = tokenize("a\n  b")
        self.assertEqual((tokens[0].line, tokens[0].column), (1, 1))
        self.assertEqual((tokens[1].offset, tokens[1].line, tokens[1].column), (4, 2, 3))
        self.assertEqual((tokens[2].offset, tokens[2].line, tokens[2].column), (5, 2, 4))

    def test_carriage_return_counts_as_column(self):
        tokens = tokenize("a\r\nb")
        self.assertEqual(lexemes(tokens), ["a", "b", ""])
        self.assertEqual((tokens[1].line, tokens[1].column), (2, 1))

    def test_empty_source_yields_only_end(self):
        tokens = tokenize("")
        self.assertEqual(tokens, [Token(TokenType.END, "", 0, 1, 1)])

    def test_whitespace_only_source(self):
        tokens = tokenize(" \t\n ")
        self.assertEqual(len(tokens), 1)
        self.assertEqual((tokens[0].kind, tokens[0].offset, tokens[0].line, tokens[0].column),
                         (TokenType.END, 4, 2, 2))

    def test_keywords_and_identifiers(self):
        tokens = tokenize("classy class while1 while true")
        self.assertEqual(kinds(tokens)[:-1], [
            TokenType.IDENTIFIER, TokenType.KEYWORD, TokenType.IDENTIFIER,
            TokenType.KEYWORD, TokenType.KEYWORD,
        ])

    def test_identifier_may_contain_digits(self):
        tokens = tokenize("abc123")
        self.assertEqual(lexemes(tokens), ["abc123", ""])
        self.assertEqual(tokens[0].kind, TokenType.IDENTIFIER)

    def test_underscore_is_unknown(self):
        """标识符只允许字母和数字"""
        tokens = tokenize("x_y")
        self.assertEqual(kinds(tokens), [
            TokenType.IDENTIFIER, TokenType.UNKNOWN, TokenType.IDENTIFIER, TokenType.END])
        self.assertEqual(tokens[1].lexeme, "_")

    def test_invalid_comment_policy(self):
        with self.assertRaises(ValueError):
            Lexer("x", comment_policy="block")


class TestNumbers(unittest.TestCase):

    def test_well_formed_numbers(self):
        for literal in ["123", "3.14", "2e10", "1.5e-3", "0", "7E+2"]:
            with self.subTest(literal=literal):
                tokens = tokenize(literal)
                self.assertEqual(len(tokens), 2)
                self.assertEqual(tokens[0].kind, TokenType.NUMBER)
                self.assertEqual(tokens[0].lexeme, literal)

    def test_malformed_numbers_are_unknown(self):
        for literal in ["1.2.3", "3e", "1.", "4e+"]:
            with self.subTest(literal=literal):
                tokens = tokenize(literal)
                self.assertEqual(tokens[0].kind, TokenType.UNKNOWN)
                self.assertEqual(tokens[0].lexeme, literal)

    def test_number_run_swallows_sign(self):
        """数字扫描会贪婪吞掉 + 和 -"""
        tokens = tokenize("1+2")
        self.assertEqual(kinds(tokens), [TokenType.UNKNOWN, TokenType.END])
        self.assertEqual(tokens[0].lexeme, "1+2")

    def test_number_stops_at_letter(self):
        tokens = tokenize("12abc")
        self.assertEqual(kinds(tokens), [TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.END])
        self.assertEqual(lexemes(tokens), ["12", "abc", ""])

    def test_spaced_arithmetic(self):
        tokens = tokenize("1 + 2")
        self.assertEqual(kinds(tokens), [
            TokenType.NUMBER, TokenType.OPERATOR, TokenType.NUMBER, TokenType.END])


class TestStrings(unittest.TestCase):

    def test_closed_string(self):
        tokens = tokenize('"abc"')
        self.assertEqual(tokens[0], Token(TokenType.STRING, '"abc"', 0, 1, 1))
        self.assertEqual(tokens[1].offset, 5)

    def test_string_with_apostrophe(self):
        tokens = tokenize('"it\'s ok"')
        self.assertEqual(kinds(tokens), [TokenType.STRING, TokenType.END])

    def test_empty_string(self):
        tokens = tokenize('""')
        self.assertEqual(tokens[0].kind, TokenType.STRING)

    def test_string_may_span_lines(self):
        tokens = tokenize('"a\nb" x')
        self.assertEqual(tokens[0].kind, TokenType.STRING)
        self.assertEqual((tokens[1].line, tokens[1].column), (2, 4))

    def test_unterminated_string_is_unknown(self):
        tokens = tokenize('"unterminated')
        self.assertEqual(kinds(tokens), [TokenType.UNKNOWN, TokenType.END])
        self.assertEqual(tokens[0].lexeme, '"unterminated')
        self.assertEqual(tokens[1].offset, 13)
        self.assertEqual(classify_unknown(tokens[0]), "UnterminatedString")


class TestComments(unittest.TestCase):

    def test_line_comment_runs_to_end_of_line(self):
        tokens = tokenize("x // note // more\ny")
        self.assertEqual(kinds(tokens), [
            TokenType.IDENTIFIER, TokenType.COMMENT, TokenType.IDENTIFIER, TokenType.END])
        self.assertEqual(tokens[1].lexeme, "// note // more")
        self.assertEqual((tokens[2].line, tokens[2].column), (2, 1))

    def test_line_comment_at_end_of_input(self):
        tokens = tokenize("// trailing")
        self.assertEqual(kinds(tokens), [TokenType.COMMENT, TokenType.END])
        self.assertEqual(tokens[0].lexeme, "// trailing")

    def test_delimited_comment_policy(self):
        tokens = Lexer("x // note // more\ny", COMMENT_POLICY_DELIMITED).tokenize()
        self.assertEqual(lexemes(tokens), ["x", "// note //", "more", "y", ""])
        self.assertEqual(tokens[1].kind, TokenType.COMMENT)

    def test_unclosed_delimited_comment_is_unknown(self):
        tokens = Lexer("// open\nx", COMMENT_POLICY_DELIMITED).tokenize()
        self.assertEqual(kinds(tokens), [TokenType.UNKNOWN, TokenType.IDENTIFIER, TokenType.END])
        self.assertEqual(tokens[0].lexeme, "// open")
        self.assertEqual(classify_unknown(tokens[0]), "LexicalUnknown")

    def test_single_slash_is_operator(self):
        tokens = tokenize("a / b")
        self.assertEqual(tokens[1], Token(TokenType.OPERATOR, "/", 2, 1, 3))


class TestOperatorsAndDelimiters(unittest.TestCase):

    def test_two_char_operators_take_priority(self):
        tokens = tokenize("a<=b||!c")
        self.assertEqual(lexemes(tokens), ["a", "<=", "b", "||", "!", "c", ""])
        self.assertEqual(kinds(tokens)[1], TokenType.OPERATOR)

    def test_triple_equals(self):
        self.assertEqual(lexemes(tokenize("===")), ["==", "=", ""])

    def test_all_delimiters(self):
        tokens = tokenize("(){}[];,.:")
        self.assertEqual(kinds(tokens)[:-1], [TokenType.DELIMITER] * 10)

    def test_all_operators(self):
        tokens = tokenize("|| && == != <= >= = + - * / % < > !")
        self.assertEqual(kinds(tokens)[:-1], [TokenType.OPERATOR] * 15)

    def test_single_ampersand_is_unknown(self):
        tokens = tokenize("a & b")
        self.assertEqual(tokens[1], Token(TokenType.UNKNOWN, "&", 2, 1, 3))

    def test_unknown_characters(self):
        tokens = tokenize("@#$")
        self.assertEqual(lexemes(unknown_tokens(tokens)), ["@", "#", "$"])
        self.assertEqual(classify_unknown(tokens[0]), "LexicalUnknown")


class TestTokenStreamInvariants(unittest.TestCase):

    SAMPLES = [
        "",
        "class A { int x; }",
        'class B {\n  // comment\n  bool f(int[] a) { return a[0] == 1.5e-3 && !"s"; }\n}\n',
        '@@ "open',
        "1+2 x_y \t\r\n 3..4 // tail",
    ]

    def test_single_trailing_end(self):
        for source in self.SAMPLES:
            with self.subTest(source=source):
                tokens = tokenize(source)
                self.assertTrue(tokens)
                self.assertEqual(tokens[-1].kind, TokenType.END)
                self.assertEqual(kinds(tokens).count(TokenType.END), 1)

    def test_offsets_non_decreasing(self):
        for source in self.SAMPLES:
            with self.subTest(source=source):
                offsets = [t.offset for t in tokenize(source)]
                self.assertEqual(offsets, sorted(offsets))

    def test_round_trip_with_whitespace(self):
        """记号词素加上被跳过的空白可以还原源码"""
        for source in self.SAMPLES:
            with self.subTest(source=source):
                rebuilt = []
                cursor = 0
                for token in tokenize(source):
                    gap = source[cursor:token.offset]
                    self.assertTrue(gap == "" or gap.isspace())
                    rebuilt.append(gap)
                    rebuilt.append(token.lexeme)
                    self.assertEqual(source[token.offset:token.offset + len(token.lexeme)], token.lexeme)
                    cursor = token.offset + len(token.lexeme)
                self.assertEqual("".join(rebuilt), source)

    def test_positions_match_offsets(self):
        source = "class A {\n\tint x;\n}"
        for token in tokenize(source):
            prefix = source[:token.offset]
            line = prefix.count("\n") + 1
            column = len(prefix) - (prefix.rfind("\n") + 1) + 1
            self.assertEqual((token.line, token.column), (line, column))

    def test_tokenize_is_repeatable(self):
        lexer = Lexer("class A { int x = 1; }")
        self.assertEqual(lexer.tokenize(), lexer.tokenize())

    def test_tokens_are_immutable(self):
        token = tokenize("x")[0]
        with self.assertRaises(Exception):
            token.lexeme = "y"

    def test_to_dict(self):
        token = tokenize("x")[0]
        self.assertEqual(token.to_dict(),
                         {"kind": "IDENTIFIER", "lexeme": "x", "offset": 0, "line": 1, "column": 1})


if __name__ == "__main__":
    unittest.main()
