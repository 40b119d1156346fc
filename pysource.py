class PythonSource:
    def __init__(self, indent="    "):
        self.indent = indent
        self.lines = []  # generated lines, already indented

    def emit(self, line, depth=0):
        # returns line index
        if line:
            self.lines.append(self.indent * depth + line)
        else:
            self.lines.append("")
        return len(self.lines) - 1

    def render(self):
        return "\n".join(self.lines)
