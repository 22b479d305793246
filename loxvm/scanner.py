

class TokenTypes:
    # Single-character tokens.
    LEFT_PAREN = 1
    RIGHT_PAREN = 2
    LEFT_BRACE = 3
    RIGHT_BRACE = 4
    COMMA = 5
    DOT = 6
    MINUS = 7
    PLUS = 8
    SEMICOLON = 9
    SLASH = 10
    STAR = 11

    # One or two character tokens.
    BANG = 12
    BANG_EQUAL = 13
    EQUAL = 14
    EQUAL_EQUAL = 15
    GREATER = 16
    GREATER_EQUAL = 17
    LESS = 18
    LESS_EQUAL = 19

    # Literals.
    IDENTIFIER = 20
    STRING = 21
    NUMBER = 22

    # Keywords.
    AND = 23
    CLASS = 24
    ELSE = 25
    FALSE = 26
    FUN = 27
    FOR = 28
    IF = 29
    NIL = 30
    OR = 31
    PRINT = 32
    RETURN = 33
    SUPER = 34
    THIS = 35
    TRUE = 36
    VAR = 37
    WHILE = 38

    ERROR = 39
    EOF = 40


TokenTypeToName = {getattr(TokenTypes, op): op
                   for op in dir(TokenTypes) if not op.startswith('_')}

SINGLE_CHAR_TOKENS = {
    '(': TokenTypes.LEFT_PAREN,
    ')': TokenTypes.RIGHT_PAREN,
    '{': TokenTypes.LEFT_BRACE,
    '}': TokenTypes.RIGHT_BRACE,
    ';': TokenTypes.SEMICOLON,
    ',': TokenTypes.COMMA,
    '.': TokenTypes.DOT,
    '-': TokenTypes.MINUS,
    '+': TokenTypes.PLUS,
    '/': TokenTypes.SLASH,
    '*': TokenTypes.STAR,
}

# char -> (type when followed by '=', type on its own)
EQUAL_SUFFIX_TOKENS = {
    '!': (TokenTypes.BANG_EQUAL, TokenTypes.BANG),
    '=': (TokenTypes.EQUAL_EQUAL, TokenTypes.EQUAL),
    '<': (TokenTypes.LESS_EQUAL, TokenTypes.LESS),
    '>': (TokenTypes.GREATER_EQUAL, TokenTypes.GREATER),
}

KEYWORDS = {
    'and': TokenTypes.AND,
    'class': TokenTypes.CLASS,
    'else': TokenTypes.ELSE,
    'false': TokenTypes.FALSE,
    'for': TokenTypes.FOR,
    'fun': TokenTypes.FUN,
    'if': TokenTypes.IF,
    'nil': TokenTypes.NIL,
    'or': TokenTypes.OR,
    'print': TokenTypes.PRINT,
    'return': TokenTypes.RETURN,
    'super': TokenTypes.SUPER,
    'this': TokenTypes.THIS,
    'true': TokenTypes.TRUE,
    'var': TokenTypes.VAR,
    'while': TokenTypes.WHILE,
}


def is_alpha(char):
    return 'a' <= char <= 'z' or 'A' <= char <= 'Z' or char == '_'


def is_digit(char):
    return '0' <= char <= '9'


class BaseToken(object):
    """
    BaseToken's just have a TokenType and source line.
    """

    def __init__(self, line, type):
        self.line = line
        self.type = type


class Token(BaseToken):
    """
    A token borrowing its lexeme from the source as a start offset and
    length. Use Scanner.get_token_string to read the text.
    """

    def __init__(self, start, length, line, type):
        super(Token, self).__init__(line, type)
        self.start = start
        self.length = length

    def __repr__(self):
        return "<Token %s line %d [%d:%d]>" % (
            TokenTypeToName[self.type], self.line,
            self.start, self.start + self.length)


class ErrorToken(BaseToken):
    """
    ErrorToken's own their error message instead of a lexeme.
    """

    def __init__(self, message, line):
        super(ErrorToken, self).__init__(line, TokenTypes.ERROR)
        self.message = message

    def __repr__(self):
        return "<ErrorToken line %d %r>" % (self.line, self.message)


class Scanner(object):
    """
    Turns source text into tokens on demand.

    The scanner never raises on bad input, it hands out an ErrorToken and
    carries on from the next character.
    """

    def __init__(self, source):
        self.source = source
        self.start = 0
        self.current = 0
        self.line = 1

    def __iter__(self):
        """Lazily yield tokens, the last one is the EOF token"""
        while True:
            token = self.scan_token()
            yield token
            if token.type == TokenTypes.EOF:
                return

    def scan_token(self):
        self._skip_whitespace()
        self.start = self.current

        if self._is_at_end():
            return self._make_token(TokenTypes.EOF)

        char = self.advance()

        if is_alpha(char):
            return self._identifier()
        if is_digit(char):
            return self._number()
        if char == '"':
            return self._string()

        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[char])
        if char in EQUAL_SUFFIX_TOKENS:
            with_equal, alone = EQUAL_SUFFIX_TOKENS[char]
            return self._make_token(with_equal if self._match('=') else alone)

        return ErrorToken("Unexpected character.", self.line)

    def get_token_string(self, token):
        if isinstance(token, ErrorToken):
            return token.message
        return self.source[token.start:token.start + token.length]

    def advance(self):
        self.current += 1
        return self.source[self.current - 1]

    def _is_at_end(self):
        return self.current >= len(self.source)

    def _make_token(self, token_type):
        return Token(self.start, self.current - self.start, self.line, token_type)

    def _match(self, expected):
        if self._peek() != expected:
            return False
        self.current += 1
        return True

    def _peek(self, distance=0):
        # '\0' stands in for the terminator past the end of the source
        index = self.current + distance
        if index >= len(self.source):
            return '\0'
        return self.source[index]

    def _skip_whitespace(self):
        while True:
            char = self._peek()
            if char in ' \r\t':
                self.advance()
            elif char == '\n':
                self.line += 1
                self.advance()
            elif char == '/' and self._peek(1) == '/':
                # A comment goes until the end of the line.
                while self._peek() != '\n' and not self._is_at_end():
                    self.advance()
            else:
                return

    def _string(self):
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self.advance()

        if self._is_at_end():
            return ErrorToken("Unterminated string.", self.line)

        # The closing quote.
        self.advance()
        return self._make_token(TokenTypes.STRING)

    def _number(self):
        while is_digit(self._peek()):
            self.advance()

        # A fractional part needs a digit after the dot, "1." leaves the dot
        if self._peek() == '.' and is_digit(self._peek(1)):
            self.advance()
            while is_digit(self._peek()):
                self.advance()

        return self._make_token(TokenTypes.NUMBER)

    def _identifier(self):
        while is_alpha(self._peek()) or is_digit(self._peek()):
            self.advance()
        text = self.source[self.start:self.current]
        return self._make_token(KEYWORDS.get(text, TokenTypes.IDENTIFIER))
