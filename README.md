# modelang

`modelang` is an interpreter for a small teaching language. It works in three steps:

1. A scanner splits the program text into lexemes.
2. A recursive-descent parser checks the syntax and the types. It translates the program into reverse Polish notation, a `Poliz`.
3. A stack machine runs that code.

## The language

```
program {
    int i = 0, n;
    real x = 1.5;
    string greeting = "hello";

    read(n);
    for (i = 0; i < n; i = i + 1)
        write(i);

    if (x > 1) write(greeting); else write("small");

    while (n > 0) n = n - 1;

    goto done;
    write("skipped");
    done: write("finished");
}
```

### Program structure

- A program is `program { declarations statements }`. Nothing may follow the closing brace.
- Declarations come before all statements. Their form is `int a, b = 3;`, `real x = -1.5;` or `string s = "text";`.
- A variable may be initialised with a constant of a matching type. An `int` constant may also initialise a `real`.
- Identifiers are made of ASCII letters and digits and start with a letter.
- Real literals need digits on both sides of the dot, as in `2.5`.

### Statements

- `if (cond) stmt else stmt`. The `else` part is required.
- `while (cond) stmt`
- `for (init; cond; step) stmt`. Each of the three parts may be empty.
- `read(id);`
- `write(expr, ...);`
- `{ ... }` blocks.
- `goto label;` and `label: stmt`.
- Expression statements, such as `a = b = 3;`.

### Operators

From lowest to highest precedence:

| Level | Operators |
| --- | --- |
| 1 | `=` |
| 2 | `or` |
| 3 | `and` |
| 4 | `== != < > <= >=` |
| 5 | `+ -` |
| 6 | `* /` |
| 7 | unary `not + -` |

### Comments

A comment starts with `/*`. It ends at the first `/` that follows, so `*/` closes it.

### Type rules, checked before the program runs

- The conditions of `if` and `for` must be integer expressions.
- The operands of `not`, `and` and `or` must be integers.
- `int` and `real` values may be mixed. Comparisons give an integer, 1 or 0.
- Strings allow `+` and the comparison operators.
- An `int` variable cannot be assigned a `real` variable.
- Every variable must be declared exactly once.
- Every label named by a `goto` must be placed somewhere in the program.

### Behaviour at run time worth knowing

- A string literal keeps its double quotes: `write("hi");` prints `"hi"`. `read` into a string variable takes one whitespace-separated word, taken as it is.
- `+` on strings puts the right operand first: `a + b` gives the text of `b` followed by that of `a`.
- Integer division truncates toward zero. An integer division by zero raises `ExecutionError`.
- `write(e1, e2, ...)` evaluates every expression but prints only the last one, on its own line. Real numbers are printed in `%g` form.
- Unary minus applied directly to a variable negates the variable itself.
- Reading a variable that was never assigned raises `ExecutionError`.
- The evaluation stack holds at most 100 values. The value of each assignment or expression statement stays on it. A loop that runs many statements can therefore fail with `Stack_is_full`.
- The reverse Polish code may be at most 1000 lexemes long. The identifier table holds at most 99 names.

## Command line

```
modelang program.txt
```

This is the same as `python -m modelang.interpreter program.txt`.

The command reads the program file as UTF-8 and runs it. Input for `read` comes from standard input, and `write` prints to standard output.

The exit status is 0 on success. The command exits with status 1 and prints a message in any of these cases:

- the number of arguments is wrong;
- the file cannot be read;
- the program has a lexical, syntax, type or run-time error.

Most messages about the program are in Russian. When the parser stops at an unexpected lexeme, it prints `unexpected lexeme` followed by that lexeme.

## From Python

```python
import io
from modelang.interpreter import Interpreter, run_file

out = io.StringIO()
Interpreter('program { write("hi"); }', stdin=io.StringIO(), stdout=out).interpret()
print(out.getvalue())   # "hi"  (with the quotes)

run_file("program.txt")  # uses sys.stdin and sys.stdout
```

`Interpreter.poliz` gives the code that the parser built.

Errors are raised as subclasses of `modelang.lexemes.InterpreterError`:

- `LexicalError`
- `ParseError`. Its `lex` attribute holds the offending lexeme, when there is one.
- `ExecutionError`

### Using the steps one at a time

- `modelang.scanner.tokenize(text, table=None)` returns every lexeme, ending with an EOF lexeme. `modelang.scanner.Scanner` reads them one at a time.
- `modelang.parser.Parser(text, table).analyze()` returns a `modelang.poliz.Poliz`.
- `Poliz.dump(table)` lists the code, one numbered lexeme per line.
- `modelang.executor.Executor(table, stdin, stdout).execute(poliz)` runs the code.
- `modelang.lexemes.IdentTable` holds the identifiers. Pass the same table to the parser and the executor.