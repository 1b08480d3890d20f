from __future__ import annotations


def render_demo_ui_html() -> str:
    return """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>GrantAxiom Workbench</title>
  <style>
    :root {
      --bg: #0f172a;
      --panel: #111c33;
      --ink: #e2e8f0;
      --muted: #94a3b8;
      --line: #1e293b;
      --accent: #8b5cf6;
      --good: #22c55e;
      --warn: #eab308;
      --bad: #ef4444;
      --radius: 12px;
      --sans: "Inter", "Segoe UI", system-ui, sans-serif;
      --mono: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace;
    }
    * { box-sizing: border-box; }
    body { margin: 0; font-family: var(--sans); color: var(--ink); background: var(--bg); }
    .wrap { max-width: 1320px; margin: 0 auto; padding: 20px; display: grid; gap: 14px; grid-template-columns: 1.2fr .8fr; }
    .card { background: var(--panel); border: 1px solid var(--line); border-radius: var(--radius); padding: 14px; }
    h1 { grid-column: 1 / -1; margin: 0; font-size: 1.3rem; letter-spacing: .02em; }
    h2 { margin: 0 0 10px; font-size: 1rem; color: var(--muted); text-transform: uppercase; letter-spacing: .08em; }
    textarea, input { width: 100%; background: #0b1224; color: var(--ink); border: 1px solid var(--line); border-radius: 8px; padding: 8px; font-family: var(--sans); }
    textarea { min-height: 180px; }
    button { background: var(--accent); color: white; border: 0; border-radius: 8px; padding: 8px 14px; cursor: pointer; }
    button:disabled { opacity: .4; cursor: not-allowed; }
    .ref { border-bottom: 1px solid var(--line); padding: 6px 0; font-size: .9rem; }
    .ref small { color: var(--muted); }
    .claim { border-left: 4px solid var(--muted); padding: 6px 10px; margin: 8px 0; background: #0b1224; border-radius: 6px; }
    .claim.verified { border-color: var(--good); }
    .claim.warning { border-color: var(--warn); }
    .claim.contradiction { border-color: var(--bad); }
    .score { font-size: 2rem; font-weight: 700; }
    .stats { display: flex; gap: 14px; margin: 6px 0 10px; font-size: .9rem; }
    .stats .verified { color: var(--good); }
    .stats .warning { color: var(--warn); }
    .stats .contradiction { color: var(--bad); }
    .msg { margin: 6px 0; font-size: .9rem; }
    .msg b { color: var(--accent); }
    #transcript { max-height: 280px; overflow-y: auto; font-family: var(--mono); }
    iframe { width: 100%; height: 420px; border: 1px solid var(--line); border-radius: 8px; background: black; }
    .row { display: flex; gap: 8px; margin-top: 8px; }
  </style>
</head>
<body>
  <div class="wrap">
    <h1>GrantAxiom Research Audit</h1>
    <div class="card">
      <h2>Proposal</h2>
      <textarea id="proposal"></textarea>
      <div class="row">
        <input id="refFiles" type="file" multiple />
        <button id="auditBtn">Run Audit</button>
      </div>
      <div id="references"></div>
    </div>
    <div class="card">
      <h2>Assistant</h2>
      <div id="transcript"></div>
      <div class="row">
        <input id="chatInput" placeholder="Ask about your proposal" />
        <button id="chatBtn">Send</button>
      </div>
    </div>
    <div class="card">
      <h2>Audit</h2>
      <div id="claimStats" class="stats"></div>
      <div id="report">No audit yet.</div>
    </div>
    <div class="card">
      <h2>Impact Simulator</h2>
      <input id="goal" placeholder="Optional simulation goal" />
      <div class="row"><button id="simBtn">Generate Simulation</button></div>
      <iframe id="sim" sandbox="allow-scripts"></iframe>
    </div>
  </div>
  <script>
    const state = { sessionId: null };
    const $ = (id) => document.getElementById(id);
    const esc = (s) => String(s ?? "").replace(/[&<>"]/g, (c) => ({"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"}[c]));

    async function api(path, options = {}) {
      const res = await fetch(path, options);
      if (!res.ok) throw new Error(`${res.status} ${await res.text()}`);
      return res.json();
    }

    function render(session) {
      $("proposal").value = session.proposalText;
      $("references").innerHTML = session.references.map((r) =>
        `<div class="ref">[${esc(r.id)}] ${esc(r.title)} (${esc(r.year)}) <small>${esc(r.contentSnippet)}</small>
         <button data-ref="${esc(r.id)}">Remove</button></div>`).join("");
      $("transcript").innerHTML = session.transcript.map((m) =>
        `<div class="msg"><b>${esc(m.role)}</b>: ${esc(m.text)}</div>`).join("");
      renderReport(session.report);
      $("auditBtn").disabled = session.pendingActions.includes("audit");
      $("chatBtn").disabled = session.pendingActions.includes("chat");
      $("simBtn").disabled = session.pendingActions.includes("simulation");
    }

    function renderClaimStats(claims) {
      const count = (status) => claims.filter((c) => c.status === status).length;
      $("claimStats").innerHTML = ["verified", "warning", "contradiction"].map((status) =>
        `<span class="${status}">${count(status)} ${status}</span>`).join("");
    }

    function renderReport(report) {
      renderClaimStats(report ? report.claims : []);
      if (!report) { $("report").textContent = "No audit yet."; return; }
      $("report").innerHTML = `<div class="score">${esc(report.overallScore)}/100</div>
        <p>${esc(report.toneAnalysis)}</p>
        <ul>${report.complianceIssues.map((i) => `<li>${esc(i)}</li>`).join("")}</ul>` +
        report.claims.map((c) => `<div class="claim ${esc(c.status)}"><b>${esc(c.status)}</b>
          (${Math.round(Number(c.confidence) * 100)}%) ${esc(c.text)}<br/><small>${esc(c.explanation)}</small>
          ${c.suggestion ? `<br/><small>Fix: ${esc(c.suggestion)}</small>` : ""}</div>`).join("");
    }

    async function refresh() { render(await api(`/sessions/${state.sessionId}`)); }

    async function saveProposal() {
      await api(`/sessions/${state.sessionId}/proposal`, {
        method: "PUT", headers: {"Content-Type": "application/json"},
        body: JSON.stringify({proposalText: $("proposal").value}),
      });
    }

    $("auditBtn").onclick = async () => {
      $("auditBtn").disabled = true;
      try { await saveProposal(); await api(`/sessions/${state.sessionId}/audit`, {method: "POST"}); }
      finally { await refresh(); }
    };

    $("chatBtn").onclick = async () => {
      const message = $("chatInput").value.trim();
      if (!message) return;
      $("chatInput").value = "";
      $("chatBtn").disabled = true;
      try {
        await api(`/sessions/${state.sessionId}/chat`, {
          method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify({message}),
        });
      } finally { await refresh(); }
    };

    $("simBtn").onclick = async () => {
      $("simBtn").disabled = true;
      try {
        await saveProposal();
        await api(`/sessions/${state.sessionId}/simulation`, {
          method: "POST", headers: {"Content-Type": "application/json"},
          body: JSON.stringify({userGoal: $("goal").value || null}),
        });
        $("sim").src = `/sessions/${state.sessionId}/simulation?ts=${Date.now()}`;
      } finally { await refresh(); }
    };

    $("refFiles").onchange = async (event) => {
      const body = new FormData();
      for (const file of event.target.files) body.append("files", file);
      await api(`/sessions/${state.sessionId}/references/upload`, {method: "POST", body});
      event.target.value = "";
      await refresh();
    };

    $("references").onclick = async (event) => {
      const refId = event.target.dataset.ref;
      if (!refId) return;
      await api(`/sessions/${state.sessionId}/references/${encodeURIComponent(refId)}`, {method: "DELETE"});
      await refresh();
    };

    (async () => {
      const session = await api("/sessions", {
        method: "POST", headers: {"Content-Type": "application/json"}, body: JSON.stringify({seedSamples: true}),
      });
      state.sessionId = session.sessionId;
      render(session);
    })();
  </script>
</body>
</html>
"""
