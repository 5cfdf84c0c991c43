"""Handles interactive/command-line mode for the monkey interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    intro = "Monkey interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to quit."
    prompt = ">> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = ">> "      # also used for prompt swapping in line continuations
    commands = ("", "help", "exit", "EOF")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._first_line_num = 0
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary monkey input."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._first_line_num = self.line_num

            source = self._tmp_line + "\n" + line if self._tmp_line else line
            source, add_to_prev = self.sess.preprocess_line(source)

            if add_to_prev:
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not source.strip():
                return

            self.sess.add(source, self._first_line_num)
            self.sess.run()

            while self.sess.results:
                self.stdout.write(self.sess.pop() + "\n")

    def onecmd(self, line):
        """Only a bare 'exit', 'help' or EOF is a shell command. Anything else, continuation lines included, is monkey
        input: 'exit(1)' calls the built-in.
        """
        if self._tmp_line and line == "EOF":
            return self.flush()
        if self._tmp_line or line.strip() not in self.commands:
            self.default(line)
            return False
        return super().onecmd(line)

    def flush(self):
        """Input ended in the middle of a continuation: the pending lines are run as they are, which reports what is
        missing, and the shell exits.
        """
        source = self._tmp_line
        self._tmp_line = ""
        self.prompt = self._tmp_prompt
        with self.sess.error_handler:
            self.sess.add(source, self._first_line_num)
            self.sess.run()
        return self.do_EOF("")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write(
            "Welcome to the monkey interpreter!\n\n"
            "Monkey is a small dynamically typed language with first-class functions and closures. Try\n"
            "'let add = fn(a, b) { a + b };' followed by 'add(1, 2)', or 'let xs = [1, 2, 3]; len(xs)'.\n"
            "Built-ins: print, eprint, len, append, bool, int, float, str, char, exit and the constant pi.\n"
        )

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
