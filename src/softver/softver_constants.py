"""
Token vocabulary for the softver teaching language.

Kinds are plain uppercase strings, shared by the lexer, the reduction engine
and the tests. `token_hashmap` maps every fixed lexeme (operators, punctuation
and keywords) to its kind; numerals and identifiers are recognised by the
lexer directly.
"""

NUMERAL = "NUMERAL"
IDENT = "IDENT"

PLUS = "PLUS"
MINUS = "MINUS"
MULT = "MULT"
DIV = "DIV"
ASSIGN = "ASSIGN"

LT = "LT"
LE = "LE"
GT = "GT"
GE = "GE"
EQ = "EQ"

AND = "AND"
OR = "OR"
NOT = "NOT"
INCR = "INCR"

IF = "IF"
THEN = "THEN"
ELSE = "ELSE"
WHILE = "WHILE"
REPEAT = "REPEAT"
UNTIL = "UNTIL"
FOR = "FOR"
SKIP = "SKIP"
TRUE = "TRUE"
FALSE = "FALSE"

LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
SEMICOLON = "SEMICOLON"

EOF = "EOF"

token_hashmap: dict[str, str] = {
    # Operators
    "+": PLUS,
    "-": MINUS,
    "*": MULT,
    "/": DIV,
    ":=": ASSIGN,
    "<": LT,
    "<=": LE,
    ">": GT,
    ">=": GE,
    "=": EQ,
    "&&": AND,
    "||": OR,
    "!": NOT,
    "++": INCR,
    # Punctuation
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    ";": SEMICOLON,
    # Keywords
    "if": IF,
    "then": THEN,
    "else": ELSE,
    "while": WHILE,
    "repeat": REPEAT,
    "until": UNTIL,
    "for": FOR,
    "skip": SKIP,
    "true": TRUE,
    "false": FALSE,
}

keywords: frozenset[str] = frozenset(k for k in token_hashmap if k.isalpha())

relational_ops: frozenset[str] = frozenset({EQ, LT, LE, GT, GE})
logical_ops: frozenset[str] = frozenset({AND, OR})
boolean_ops: frozenset[str] = relational_ops | logical_ops

# Reserved for the statement layer; the expression engine never consumes them.
opaque_ops: frozenset[str] = frozenset(
    {
        DIV,
        ASSIGN,
        NOT,
        INCR,
        IF,
        THEN,
        ELSE,
        WHILE,
        REPEAT,
        UNTIL,
        FOR,
        LBRACE,
        RBRACE,
        SEMICOLON,
    }
)
