"""Parser for the shell's command language: words, < > >>, |, &, ; and ( )."""

from dataclasses import dataclass, field

from xvtools.filestat import O_CREATE, O_RDONLY, O_TRUNC, O_WRONLY

MAXARGS = 10
WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"

WORD = "word"
END = ""


class ShellSyntaxError(Exception):
    """A command line that cannot be parsed."""

    def __init__(self, message, leftovers=None):
        super().__init__(message)
        self.leftovers = leftovers


@dataclass
class ExecCmd:
    """Run a program with its arguments; argv[0] names the program."""

    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run *cmd* with descriptor *fd* opened on *file* using *mode*."""

    cmd: object
    file: str
    mode: int
    fd: int


@dataclass
class PipeCmd:
    """Connect the output of *left* to the input of *right*."""

    left: object
    right: object


@dataclass
class ListCmd:
    """Run *left*, wait for it, then run *right*."""

    left: object
    right: object


@dataclass
class BackCmd:
    """Run *cmd* without waiting for it."""

    cmd: object


@dataclass(frozen=True)
class Token:
    """One lexical token: its kind and the text it covers."""

    kind: str
    text: str


class Tokenizer:
    """Splits a command line into words and operator tokens.

    Token kinds are WORD, END, or the operator itself:
    ``| ( ) ; & < > >>``.
    """

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def _skip_space(self):
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    @property
    def rest(self):
        """The text not consumed yet."""
        return self.text[self.pos:]

    def peek(self, tokens):
        """Skip whitespace and tell whether the next character is one of *tokens*."""
        self._skip_space()
        return self.pos < len(self.text) and self.text[self.pos] in tokens

    def next_token(self):
        """Consume and return the next Token, skipping whitespace around it."""
        self._skip_space()
        text = self.text
        start = self.pos
        if start == len(text):
            kind = END
        else:
            ch = text[start]
            if ch in "|();&<":
                self.pos += 1
                kind = ch
            elif ch == ">":
                self.pos += 1
                if text[self.pos:self.pos + 1] == ">":
                    self.pos += 1
                    kind = ">>"
                else:
                    kind = ">"
            else:
                kind = WORD
                while (
                    self.pos < len(text)
                    and text[self.pos] not in WHITESPACE
                    and text[self.pos] not in SYMBOLS
                ):
                    self.pos += 1
        token = Token(kind, text[start:self.pos])
        self._skip_space()
        return token


_REDIRECTIONS = {
    "<": (O_RDONLY, 0),
    ">": (O_WRONLY | O_CREATE | O_TRUNC, 1),
    ">>": (O_WRONLY | O_CREATE, 1),
}


def parse_command(line):
    """Parse one command line into a command tree; raises ShellSyntaxError."""
    tokens = Tokenizer(line)
    cmd = _parse_line(tokens)
    tokens.peek("")
    if tokens.rest:
        raise ShellSyntaxError("syntax", leftovers=tokens.rest)
    return cmd


def _parse_line(tokens):
    cmd = _parse_pipe(tokens)
    while tokens.peek("&"):
        tokens.next_token()
        cmd = BackCmd(cmd)
    if tokens.peek(";"):
        tokens.next_token()
        cmd = ListCmd(cmd, _parse_line(tokens))
    return cmd


def _parse_pipe(tokens):
    cmd = _parse_exec(tokens)
    if tokens.peek("|"):
        tokens.next_token()
        cmd = PipeCmd(cmd, _parse_pipe(tokens))
    return cmd


def _parse_redirs(cmd, tokens):
    while tokens.peek("<>"):
        operator = tokens.next_token().kind
        target = tokens.next_token()
        if target.kind != WORD:
            raise ShellSyntaxError("missing file for redirection")
        mode, fd = _REDIRECTIONS[operator]
        cmd = RedirCmd(cmd, target.text, mode, fd)
    return cmd


def _parse_block(tokens):
    if not tokens.peek("("):
        raise ShellSyntaxError("parseblock")
    tokens.next_token()
    cmd = _parse_line(tokens)
    if not tokens.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    tokens.next_token()
    return _parse_redirs(cmd, tokens)


def _parse_exec(tokens):
    if tokens.peek("("):
        return _parse_block(tokens)
    exec_cmd = ExecCmd()
    cmd = _parse_redirs(exec_cmd, tokens)
    while not tokens.peek("|)&;"):
        token = tokens.next_token()
        if token.kind == END:
            break
        if token.kind != WORD:
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(token.text)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        cmd = _parse_redirs(cmd, tokens)
    return cmd