"""Output sinks beyond a plain text stream.

``run()`` only needs an object with ``write(str)``. KafkaSink publishes each
complete output line as one message; TeeSink fans writes out to several
sinks so lines can go to stdout and Kafka at once.
"""

import logging

from confluent_kafka import Producer

logger = logging.getLogger(__name__)


class KafkaSink:

    def __init__(self, bootstrap_servers: str, topic: str, producer=None):
        self.topic = topic
        self.producer = producer or Producer({
            "bootstrap.servers": bootstrap_servers,
            "acks": "all",
            "client.id": "access-monitor",
        })
        self._pending = ""
        self.produced = 0

    def write(self, text: str) -> None:
        self._pending += text
        while "\n" in self._pending:
            line, self._pending = self._pending.split("\n", 1)
            self.producer.produce(topic=self.topic, value=line.encode("utf-8"))
            self.producer.poll(0)
            self.produced += 1

    def close(self) -> None:
        if self._pending:
            self.write("\n")
        remaining = self.producer.flush()
        if remaining:
            logger.warning("%d messages still undelivered to '%s'", remaining, self.topic)
        logger.info("published %d lines to '%s'", self.produced, self.topic)


class TeeSink:

    def __init__(self, *sinks):
        self.sinks = sinks

    def write(self, text: str) -> None:
        for sink in self.sinks:
            sink.write(text)
