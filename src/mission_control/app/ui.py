from __future__ import annotations


def render_homepage() -> str:
    return """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Mission Control</title>
  <link
    href="https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;500;700&display=swap"
    rel="stylesheet"
  >
  <style>
    :root {
      --bg: #f1f3f6;
      --panel: #ffffff;
      --ink: #15202b;
      --muted: #5f6b76;
      --accent: #2f6fd6;
      --line: #dbe0e6;
      --warn: #b00020;
      --ok: #1f8a5b;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: "Space Grotesk", sans-serif;
      color: var(--ink);
      background: var(--bg);
    }
    .wrap {
      max-width: 1180px;
      margin: 24px auto;
      padding: 0 16px 24px;
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 16px;
    }
    .hero, .card {
      background: var(--panel);
      border: 1px solid var(--line);
      border-radius: 14px;
      padding: 16px;
    }
    .hero { grid-column: 1 / -1; display: flex; gap: 12px; align-items: center; }
    .hero h1 { margin: 0; font-size: 1.6rem; flex: 1; }
    .wide { grid-column: 1 / -1; }
    h2 { margin: 0 0 10px; font-size: 1.05rem; }
    input, select, textarea {
      border: 1px solid var(--line);
      border-radius: 8px;
      padding: 8px 10px;
      font: inherit;
    }
    #searchInput { width: 340px; }
    button {
      border: none;
      border-radius: 8px;
      padding: 8px 12px;
      font: inherit;
      font-weight: 700;
      cursor: pointer;
      background: var(--accent);
      color: #fff;
    }
    .chips button { background: #e8eef8; color: var(--accent); margin: 0 4px 8px 0; }
    .chips button.active { background: var(--accent); color: #fff; }
    ul { list-style: none; margin: 0; padding: 0; }
    li { padding: 8px 0; border-bottom: 1px solid var(--line); }
    .meta { color: var(--muted); font-size: 0.82rem; }
    .badge {
      display: inline-block;
      font-size: 0.72rem;
      border-radius: 999px;
      padding: 2px 8px;
      background: #e8eef8;
      margin-right: 6px;
    }
    .overdue { color: var(--warn); }
    .done { text-decoration: line-through; color: var(--muted); }
    .error { color: var(--warn); }
    @media (max-width: 860px) { .wrap { grid-template-columns: 1fr; } }
  </style>
</head>
<body>
  <main class="wrap">
    <section class="hero">
      <h1>Mission Control</h1>
      <input id="searchInput" placeholder="Search activities and tasks">
      <button id="searchBtn">Search</button>
    </section>

    <section class="card wide" id="searchCard" hidden>
      <h2>Search results <span class="meta" id="searchMeta"></span></h2>
      <ul id="searchResults"></ul>
    </section>

    <section class="card">
      <h2>Tasks</h2>
      <form id="taskForm" class="row">
        <input id="taskTitle" placeholder="New task" required>
        <select id="taskPriority">
          <option value="high">high</option>
          <option value="medium" selected>medium</option>
          <option value="low">low</option>
        </select>
        <button type="submit">Add</button>
      </form>
      <ul id="taskList"></ul>
    </section>

    <section class="card">
      <h2>Shared memo</h2>
      <form id="memoForm">
        <input id="memoDirection" placeholder="to / from" required>
        <input id="memoMessage" placeholder="Message" required>
        <button type="submit">Send</button>
      </form>
      <ul id="memoList"></ul>
    </section>

    <section class="card">
      <h2>Activity</h2>
      <div class="chips" id="activityFilters"></div>
      <div id="activityGroups"></div>
    </section>

    <section class="card">
      <h2>Shared tasks</h2>
      <div id="sharedTaskGroups"></div>
    </section>

    <section class="card wide">
      <h2>Outputs</h2>
      <div class="chips" id="outputFilters"></div>
      <ul id="outputList"></ul>
    </section>

    <p class="status wide" id="statusText"></p>
  </main>

  <script>
    const ACTIVITY_FILTERS = ["ALL", "TASK", "FILE", "MESSAGE", "EXEC"];
    const OUTPUT_FILTERS = ["ALL", "ACTION", "DOCS", "MEMORY", "GITHUB", "SLIDE", "OTHER"];
    const statusText = document.getElementById("statusText");
    let activityFilter = "ALL";
    let outputFilter = "ALL";

    function setStatus(message, isError = false) {
      statusText.textContent = message;
      statusText.classList.toggle("error", isError);
    }

    function el(tag, text, className) {
      const node = document.createElement(tag);
      if (text !== undefined) node.textContent = text;
      if (className) node.className = className;
      return node;
    }

    async function api(url, method = "GET", body) {
      const options = { method, headers: { "Content-Type": "application/json" } };
      if (body !== undefined) options.body = JSON.stringify(body);
      const response = await fetch(url, options);
      const data = await response.json();
      if (!response.ok) throw new Error(data.error || JSON.stringify(data));
      return data;
    }

    function chips(containerId, values, current, onPick) {
      const container = document.getElementById(containerId);
      container.replaceChildren();
      for (const value of values) {
        const button = el("button", value, value === current ? "active" : "");
        button.addEventListener("click", () => onPick(value));
        container.appendChild(button);
      }
    }

    async function loadTasks() {
      const tasks = await api("/api/tasks");
      const list = document.getElementById("taskList");
      list.replaceChildren();
      for (const task of tasks) {
        const item = el("li");
        const title = el("span", task.title, task.status === "completed" ? "done" : "");
        item.append(el("span", task.priority, "badge"), title);
        item.addEventListener("click", async () => {
          const status = task.status === "completed" ? "pending" : "completed";
          await api("/api/tasks", "PUT", { id: task.id, status });
          await loadTasks();
        });
        list.appendChild(item);
      }
    }

    async function loadMemos() {
      const memos = await api("/api/shared-memo");
      const list = document.getElementById("memoList");
      list.replaceChildren();
      for (const memo of memos) {
        const item = el("li", "", memo.read ? "meta" : "");
        item.append(el("span", memo.type, "badge"), el("span", `${memo.direction}: ${memo.message}`));
        item.addEventListener("click", async () => {
          await api("/api/shared-memo", "PUT", { id: memo.id, read: !memo.read });
          await loadMemos();
        });
        list.appendChild(item);
      }
    }

    async function loadActivities() {
      chips("activityFilters", ACTIVITY_FILTERS, activityFilter, (value) => {
        activityFilter = value;
        loadActivities().catch((err) => setStatus(String(err.message || err), true));
      });
      const groups = await api(`/api/activities/by-date?filter=${activityFilter}`);
      const container = document.getElementById("activityGroups");
      container.replaceChildren();
      for (const [day, activities] of Object.entries(groups)) {
        container.appendChild(el("h3", day, "meta"));
        const list = el("ul");
        for (const activity of activities) {
          const item = el("li");
          item.append(el("span", activity.type, "badge"), el("span", `${activity.action} ${activity.details}`));
          list.appendChild(item);
        }
        container.appendChild(list);
      }
    }

    async function loadSharedTasks() {
      const groups = await api("/api/shared-tasks/by-owner");
      const container = document.getElementById("sharedTaskGroups");
      container.replaceChildren();
      for (const [owner, tasks] of Object.entries(groups)) {
        container.appendChild(el("h3", owner, "meta"));
        const list = el("ul");
        for (const task of tasks) {
          const item = el("li", "", task.completed ? "done" : task.overdue ? "overdue" : "");
          item.append(el("span", task.priority, "badge"), el("span", `${task.title} ${task.dueDate || ""}`));
          item.addEventListener("click", async () => {
            await api("/api/shared-tasks", "PUT", { id: task.id, completed: !task.completed });
            await loadSharedTasks();
          });
          list.appendChild(item);
        }
        container.appendChild(list);
      }
    }

    async function loadOutputs() {
      chips("outputFilters", OUTPUT_FILTERS, outputFilter, (value) => {
        outputFilter = value;
        loadOutputs().catch((err) => setStatus(String(err.message || err), true));
      });
      const outputs = await api(`/api/outputs?filter=${outputFilter}`);
      const list = document.getElementById("outputList");
      list.replaceChildren();
      for (const output of outputs) {
        const item = el("li");
        const link = el("a", output.title);
        link.href = output.url;
        link.target = "_blank";
        item.append(el("span", output.status, "badge"));
        if (output.action) item.append(el("span", output.action, "badge"));
        item.append(link, el("div", output.summary || "", "meta"));
        list.appendChild(item);
      }
    }

    async function runSearch() {
      const query = document.getElementById("searchInput").value;
      const data = await api(`/api/search?q=${encodeURIComponent(query)}`);
      document.getElementById("searchCard").hidden = false;
      document.getElementById("searchMeta").textContent = `${data.total} result(s)`;
      const list = document.getElementById("searchResults");
      list.replaceChildren();
      for (const result of data.results) {
        const label = result.type === "task" ? result.item.title : result.item.details;
        const item = el("li");
        item.append(el("span", `${result.type} ${result.score}`, "badge"), el("span", label));
        list.appendChild(item);
      }
    }

    document.getElementById("searchBtn").addEventListener("click", () => {
      runSearch().catch((err) => setStatus(String(err.message || err), true));
    });

    document.getElementById("taskForm").addEventListener("submit", async (event) => {
      event.preventDefault();
      try {
        await api("/api/tasks", "POST", {
          title: document.getElementById("taskTitle").value.trim(),
          priority: document.getElementById("taskPriority").value,
        });
        document.getElementById("taskTitle").value = "";
        await loadTasks();
      } catch (err) {
        setStatus(String(err.message || err), true);
      }
    });

    document.getElementById("memoForm").addEventListener("submit", async (event) => {
      event.preventDefault();
      try {
        await api("/api/shared-memo", "POST", {
          direction: document.getElementById("memoDirection").value,
          message: document.getElementById("memoMessage").value,
        });
        document.getElementById("memoMessage").value = "";
        await loadMemos();
      } catch (err) {
        setStatus(String(err.message || err), true);
      }
    });

    Promise.all([loadTasks(), loadMemos(), loadActivities(), loadSharedTasks(), loadOutputs()])
      .then(() => setStatus("Ready."))
      .catch((err) => setStatus(String(err.message || err), true));
  </script>
</body>
</html>
"""
