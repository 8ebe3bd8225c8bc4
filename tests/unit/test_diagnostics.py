import logging
from src.rvasm.diagnostics import error, warning, has_errors, log_diagnostics

def test_error_str():
    d = error("etiqueta no definida", line=12, col=8, file="prog.asm", hint="defina 'loop'")
    s = str(d)
    assert "prog.asm:12:8:" in s
    assert "ERROR: etiqueta no definida" in s
    assert "(pista: defina 'loop')" in s

def test_has_errors_and_logging(caplog):
    diags = [warning("literal inválido", line=3, kind="bad_literal")]
    assert not has_errors(diags)
    diags.append(error("mal", line=4))
    assert has_errors(diags)
    with caplog.at_level(logging.INFO, logger="rvasm.test"):
        log_diagnostics(logging.getLogger("rvasm.test"), diags)
    levels = [r.levelno for r in caplog.records]
    assert levels == [logging.WARNING, logging.ERROR]
    assert "ADVERTENCIA: literal inválido" in caplog.records[0].getMessage()
